"""Image assets for the submission."""

from .generator import AssetGenerator, ImageGenerationError, build_image_prompt

__all__ = ["AssetGenerator", "ImageGenerationError", "build_image_prompt"]
