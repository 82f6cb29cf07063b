"""Core data models passed between pipeline stages."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReadmePayload(BaseModel):
    """Structured README response expected from the text model."""

    model_config = ConfigDict(populate_by_name=True)

    project_name: str = Field(alias="projectName", min_length=1)
    brief_description: str = Field(alias="briefDescription", min_length=1)
    readme_content: str = Field(alias="readmeContent", min_length=1)


@dataclass
class GeneratedContent:
    """Text fields drafted for the submission form."""

    project_name: str
    brief_description: str
    readme: str
    detailed_description: str


@dataclass
class ImageSet:
    """Local image files to upload, either generated or pre-staged."""

    logo: Optional[Path] = None
    cover: Optional[Path] = None
    screenshots: List[Path] = field(default_factory=list)

    def paths(self) -> List[Path]:
        """Return every present image in upload order."""
        ordered = [self.logo, self.cover, *self.screenshots]
        return [path for path in ordered if path is not None]


@dataclass
class SubmissionResult:
    """Everything a pipeline run produced."""

    content: GeneratedContent
    images: ImageSet
    video_script_path: Optional[Path] = None
