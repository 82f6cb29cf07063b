"""Source analyzers used to summarize cloned repositories."""

from .tree_sitter import FileSymbols, SymbolExtractor, SymbolParseError

__all__ = ["FileSymbols", "SymbolExtractor", "SymbolParseError"]
