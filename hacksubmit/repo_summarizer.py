"""Walks a working copy and condenses it into a text summary for the LLM."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List

from .analyzers import FileSymbols, SymbolExtractor, SymbolParseError
from .logging import get_logger

SUMMARIZED_SUFFIXES = (".js", ".ts", ".py", ".java", ".md")

_EXCLUDED_DIRS = {".git"}

MARKDOWN_PREVIEW_LINES = 5
UNSUPPORTED_SUMMARY = "- **Summary:** Not available for this file type.\n"


def _iter_files(directory: Path) -> Iterator[Path]:
    """Yield files depth-first in name order without following symlinks."""
    with os.scandir(directory) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        if entry.is_dir(follow_symlinks=False):
            if entry.name in _EXCLUDED_DIRS:
                continue
            yield from _iter_files(Path(entry.path))
        elif entry.is_file(follow_symlinks=False):
            yield Path(entry.path)


def _format_symbols(symbols: FileSymbols) -> str:
    lines = [
        f"- **Imports:** {', '.join(symbols.imports)}",
        f"- **Exports:** {', '.join(symbols.exports)}",
        f"- **Classes:** {', '.join(symbols.classes)}",
        f"- **Functions:** {', '.join(symbols.functions)}",
    ]
    return "\n".join(lines) + "\n"


def markdown_preview(content: str) -> str:
    lines = content.split("\n")[:MARKDOWN_PREVIEW_LINES]
    return "- **Content Preview:**\n" + "\n".join(lines) + "\n"


class RepoSummarizer:
    """Produces one ``File:`` section per summarizable file under a root."""

    def __init__(self, extractor: SymbolExtractor | None = None) -> None:
        self.extractor = extractor or SymbolExtractor()
        self.logger = get_logger("summarizer")

    def summarize(self, root: str | Path) -> str:
        """Return the concatenated per-file synopses for ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        sections: List[str] = []
        for path in _iter_files(root_path):
            if not path.name.endswith(SUMMARIZED_SUFFIXES):
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Skipping unreadable file %s: %s", path, exc)
                continue
            rel_path = "/" + path.relative_to(root_path).as_posix()
            synopsis = self.summarize_file(content, path.name)
            sections.append(f"\n\n---\n**File:** {rel_path}\n{synopsis}\n")

        self.logger.debug("Summarized %d files under %s", len(sections), root_path)
        return "".join(sections)

    def summarize_file(self, content: str, filename: str) -> str:
        """Return the synopsis for a single file's contents."""
        if self.extractor.supports(filename):
            try:
                symbols = self.extractor.extract(content, filename)
            except SymbolParseError as exc:
                self.logger.warning("Error parsing file %s: %s", filename, exc)
                return ""
            return _format_symbols(symbols)
        if filename.endswith(".md"):
            return markdown_preview(content)
        return UNSUPPORTED_SUMMARY


__all__ = ["RepoSummarizer", "SUMMARIZED_SUFFIXES", "markdown_preview"]
