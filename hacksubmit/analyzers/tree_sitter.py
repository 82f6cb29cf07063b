"""Tree-sitter powered extraction of top-level module symbols."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

_LANGUAGE_BY_SUFFIX = {
    ".js": "javascript",
    ".ts": "typescript",
    ".py": "python",
}

_CLASS_NODES = {"class_declaration", "abstract_class_declaration"}
_FUNCTION_NODES = {"function_declaration", "generator_function_declaration"}
# Re-export-all and TypeScript export assignments count as neither named nor default.
_UNCOUNTED_EXPORT_TOKENS = {"*", "=", "namespace"}


class SymbolParseError(ValueError):
    """Raised when a source file does not parse cleanly."""


@dataclass
class FileSymbols:
    """Top-level names declared by one source file, in document order."""

    imports: List[str] = field(default_factory=list)
    exports: List[str] = field(default_factory=list)
    classes: List[str] = field(default_factory=list)
    functions: List[str] = field(default_factory=list)


class SymbolExtractor:
    """Lists imports, export kinds, classes and functions at module level."""

    def __init__(self) -> None:
        self._parsers: Dict[str, Parser] = {}

    @staticmethod
    def language_for(filename: str) -> Optional[str]:
        lower = filename.lower()
        for suffix, language in _LANGUAGE_BY_SUFFIX.items():
            if lower.endswith(suffix):
                return language
        return None

    def supports(self, filename: str) -> bool:
        return self.language_for(filename) is not None

    def extract(self, source: str, filename: str) -> FileSymbols:
        """Parse ``source`` and return its top-level symbols.

        Raises :class:`SymbolParseError` when the file has syntax errors or its
        extension has no grammar.
        """
        language = self.language_for(filename)
        if language is None:
            raise SymbolParseError(f"No grammar available for {filename}")
        source_bytes = source.encode("utf-8")
        tree = self._get_parser(language).parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise SymbolParseError(f"Syntax error in {filename} near line {line}")
        if language == "python":
            return self._collect_python(root, source_bytes)
        return self._collect_ecmascript(root, source_bytes)

    def _get_parser(self, language: str) -> Parser:
        parser = self._parsers.get(language)
        if parser is None:
            parser = get_parser(language)
            self._parsers[language] = parser
        return parser

    @staticmethod
    def _node_text(node: Node, source_bytes: bytes) -> str:
        return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")

    def _named_field(self, node: Node, name: str, source_bytes: bytes) -> str:
        child = node.child_by_field_name(name)
        return self._node_text(child, source_bytes) if child is not None else ""

    def _collect_ecmascript(self, root: Node, source_bytes: bytes) -> FileSymbols:
        symbols = FileSymbols()
        for child in root.children:
            if child.type == "import_statement":
                source_node = child.child_by_field_name("source")
                if source_node is not None:
                    symbols.imports.append(
                        _unquote(self._node_text(source_node, source_bytes))
                    )
            elif child.type == "export_statement":
                tokens = {token.type for token in child.children}
                if tokens & _UNCOUNTED_EXPORT_TOKENS:
                    continue
                is_default = "default" in tokens
                symbols.exports.append("default" if is_default else "named")
            elif child.type in _CLASS_NODES:
                name = self._named_field(child, "name", source_bytes)
                if name:
                    symbols.classes.append(name)
            elif child.type in _FUNCTION_NODES:
                name = self._named_field(child, "name", source_bytes)
                if name:
                    symbols.functions.append(name)
        return symbols

    def _collect_python(self, root: Node, source_bytes: bytes) -> FileSymbols:
        symbols = FileSymbols()
        for child in root.children:
            node = child
            if node.type == "decorated_definition":
                definition = node.child_by_field_name("definition")
                if definition is None:
                    continue
                node = definition
            if node.type == "import_statement":
                for name_node in node.children_by_field_name("name"):
                    if name_node.type == "aliased_import":
                        name_node = name_node.child_by_field_name("name") or name_node
                    symbols.imports.append(self._node_text(name_node, source_bytes))
            elif node.type in {"import_from_statement", "future_import_statement"}:
                module = self._named_field(node, "module_name", source_bytes)
                symbols.imports.append(module or "__future__")
            elif node.type == "class_definition":
                name = self._named_field(node, "name", source_bytes)
                if name:
                    symbols.classes.append(name)
            elif node.type == "function_definition":
                name = self._named_field(node, "name", source_bytes)
                if name:
                    symbols.functions.append(name)
        return symbols

    @staticmethod
    def _first_error_line(node: Node) -> int:
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == "ERROR" or current.is_missing:
                return current.start_point[0] + 1
            stack.extend(reversed(current.children))
        return node.start_point[0] + 1


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"', "`"}:
        return value[1:-1]
    return value


__all__ = ["FileSymbols", "SymbolExtractor", "SymbolParseError"]
