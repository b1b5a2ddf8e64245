"""
Request-struct reflection.

Locates ``<Handler>Req`` struct declarations in the configured type sources
and reports their path-bound fields (``uri:"name"`` tags) with a scalar kind
and required flag.
"""

from __future__ import annotations

import glob
import re
import threading
from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from swagcomment.exceptions import GoParseError, TypeSourceUnreadableError
from swagcomment.logging_config import get_logger
from swagcomment.syntax import GoSource, SyntaxCache, node_text

logger = get_logger(__name__)

URI_TAG_RE = re.compile(r'uri:"([^"]+)"')
REQUIRED_TAG_RE = re.compile(r'binding:"[^"]*required[^"]*"')

KIND_BY_GO_TYPE = {
    "int": "integer",
    "int32": "integer",
    "int64": "integer",
    "uint": "integer",
    "uint32": "integer",
    "uint64": "integer",
    "float32": "number",
    "float64": "number",
    "bool": "boolean",
}


@dataclass(frozen=True)
class PathParam:
    """A request-struct field bound to a URL path placeholder."""

    name: str
    kind: str
    required: bool


# Path parameters of one request type, keyed by placeholder name.
# An empty mapping stands for a type that could not be located.
RequestTypeInfo = dict[str, PathParam]


def go_type_kind(type_node: Optional[Node]) -> str:
    """Map a field's declared Go type to a swagger scalar kind."""
    if type_node is not None and type_node.type == "type_identifier":
        return KIND_BY_GO_TYPE.get(node_text(type_node), "string")
    return "string"


def struct_path_params(struct_node: Node) -> RequestTypeInfo:
    """Collect the ``uri``-tagged fields of a ``struct_type`` node."""
    params: RequestTypeInfo = {}
    for field_list in struct_node.named_children:
        if field_list.type != "field_declaration_list":
            continue
        for field_decl in field_list.named_children:
            if field_decl.type != "field_declaration":
                continue
            tag = node_text(field_decl.child_by_field_name("tag"))
            uri = URI_TAG_RE.search(tag)
            if not uri:
                continue
            name = uri.group(1)
            params[name] = PathParam(
                name=name,
                kind=go_type_kind(field_decl.child_by_field_name("type")),
                required=bool(REQUIRED_TAG_RE.search(tag)),
            )
    return params


class RequestTypeReflector:
    """Finds request structs across type-source globs, memoizing results.

    Positive and negative lookups are cached by qualified name for the
    lifetime of the reflector. Unreadable type sources are skipped.
    """

    def __init__(self, types_paths: tuple[str, ...] | list[str], syntax_cache: SyntaxCache):
        self.types_paths = tuple(types_paths)
        self._syntax_cache = syntax_cache
        self._cache: dict[str, RequestTypeInfo] = {}
        self._lock = threading.Lock()

    def type_source_files(self) -> list[str]:
        """Expand the configured globs, keeping glob order and dropping duplicates."""
        files: list[str] = []
        seen: set[str] = set()
        for pattern in self.types_paths:
            for match in sorted(glob.glob(pattern, recursive=True)):
                if match not in seen:
                    seen.add(match)
                    files.append(match)
        return files

    def find_request_type(self, qualified_name: str) -> RequestTypeInfo:
        """Return the path parameters of ``pkg.Type`` (empty when not found)."""
        with self._lock:
            cached = self._cache.get(qualified_name)
        if cached is not None:
            return cached

        info = self._reflect(qualified_name)

        with self._lock:
            return self._cache.setdefault(qualified_name, info)

    def _load_type_source(self, path: str) -> GoSource:
        try:
            return self._syntax_cache.get_tree(path)
        except GoParseError as e:
            raise TypeSourceUnreadableError(path, e.reason) from e

    def _reflect(self, qualified_name: str) -> RequestTypeInfo:
        parts = qualified_name.split(".")
        if len(parts) != 2:
            return {}
        struct_name = parts[1]

        for path in self.type_source_files():
            try:
                source = self._load_type_source(path)
            except TypeSourceUnreadableError as e:
                logger.warning("Skipping type source", path=path, error=e.reason)
                continue

            for spec in source.type_specs():
                if node_text(spec.child_by_field_name("name")) != struct_name:
                    continue
                type_node = spec.child_by_field_name("type")
                if type_node is None or type_node.type != "struct_type":
                    continue
                return struct_path_params(type_node)

        logger.debug("Request type not found", type=qualified_name)
        return {}

    def cached_names(self) -> list[str]:
        with self._lock:
            return list(self._cache)
