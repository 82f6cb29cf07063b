"""LLM-backed drafting of submission text."""

from .generator import ContentGenerator, ContentParseError, extract_json_object

__all__ = ["ContentGenerator", "ContentParseError", "extract_json_object"]
