"""
Go syntax trees and the process-wide parse cache.

Go sources are parsed with tree-sitter. Comments are ordinary named nodes in
the tree, so doc-comment blocks can be recovered with their byte offsets.

Usage:
    cache = SyntaxCache()
    source = cache.get_tree("internal/api/http/web/handler/user_handler.go")
    for decl in source.function_declarations():
        print(decl.name, decl.start_byte, decl.doc_start_byte)
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterator, Optional

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

from swagcomment.exceptions import GoParseError
from swagcomment.logging_config import get_logger

logger = get_logger(__name__)

FUNCTION_NODE_TYPES = ("function_declaration", "method_declaration")


@lru_cache(maxsize=1)
def go_language() -> Language:
    """Return the tree-sitter Go language (loaded once)."""
    return Language(tsgo.language())


def parse_go(source: bytes) -> Tree:
    """Parse Go source bytes into a tree-sitter tree.

    A new Parser is created per call; parsers are not shared across threads.
    """
    return Parser(go_language()).parse(source)


def node_text(node: Optional[Node]) -> str:
    """Decode the source text covered by a node ("" for None)."""
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


@dataclass
class FuncDecl:
    """A top-level function or method declaration in a parsed Go file.

    Attributes:
        node: The ``function_declaration``/``method_declaration`` node.
        doc_comments: Comment nodes forming the declaration's doc block,
            in source order (empty when undocumented).
    """

    node: Node
    doc_comments: list[Node] = field(default_factory=list)

    @property
    def name(self) -> str:
        return node_text(self.node.child_by_field_name("name"))

    @property
    def is_method(self) -> bool:
        return self.node.type == "method_declaration"

    @property
    def receiver(self) -> Optional[Node]:
        return self.node.child_by_field_name("receiver")

    @property
    def parameters(self) -> Optional[Node]:
        return self.node.child_by_field_name("parameters")

    @property
    def start_byte(self) -> int:
        """Offset of the ``func`` keyword."""
        return self.node.start_byte

    @property
    def doc_start_byte(self) -> int:
        """Offset of the first doc comment, or of the declaration when undocumented."""
        if self.doc_comments:
            return self.doc_comments[0].start_byte
        return self.node.start_byte

    @property
    def doc_text(self) -> str:
        return "\n".join(node_text(c) for c in self.doc_comments)


@dataclass
class GoSource:
    """A parsed Go file: its absolute path, raw bytes and syntax tree."""

    path: str
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def top_level(self) -> list[Node]:
        return list(self.root.named_children)

    def function_declarations(self) -> list[FuncDecl]:
        """Top-level function and method declarations in source order."""
        nodes = self.top_level()
        decls = []
        for index, node in enumerate(nodes):
            if node.type in FUNCTION_NODE_TYPES:
                decls.append(FuncDecl(node=node, doc_comments=_doc_comments(nodes, index)))
        return decls

    def type_specs(self) -> Iterator[Node]:
        """Yield every top-level ``type_spec`` node in declaration order."""
        for node in self.top_level():
            if node.type != "type_declaration":
                continue
            for child in node.named_children:
                if child.type == "type_spec":
                    yield child


def _doc_comments(siblings: list[Node], index: int) -> list[Node]:
    """Collect the comment group directly attached above ``siblings[index]``.

    Each comment must end on the line right before the next comment (or the
    declaration). A comment that starts on the same line as preceding code is
    a trailing comment and ends the group.
    """
    group: list[Node] = []
    next_row = siblings[index].start_point[0]
    i = index - 1
    while i >= 0:
        candidate = siblings[i]
        if candidate.type != "comment" or next_row - candidate.end_point[0] != 1:
            break
        if i > 0 and siblings[i - 1].end_point[0] == candidate.start_point[0]:
            break
        group.append(candidate)
        next_row = candidate.start_point[0]
        i -= 1
    group.reverse()
    return group


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def load_go_source(path: str) -> GoSource:
    """Read and parse one Go file.

    Raises:
        GoParseError: If the file cannot be read or has syntax errors
    """
    try:
        with open(path, "rb") as f:
            source = f.read()
    except OSError as e:
        raise GoParseError(path, str(e)) from e

    tree = parse_go(source)
    if tree.root_node.has_error:
        bad = _first_error(tree.root_node)
        row, column = bad.start_point[0] + 1, bad.start_point[1] + 1
        raise GoParseError(path, f"syntax error at {row}:{column}")
    return GoSource(path=path, source=source, tree=tree)


class SyntaxCache:
    """Thread-safe read-through cache of parsed Go files keyed by absolute path.

    Concurrent misses on the same path are single-flighted through a per-path
    lock. Parse failures are raised to the caller and never cached, so a later
    call retries. Entries are never evicted.
    """

    def __init__(self) -> None:
        self._trees: dict[str, GoSource] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def _key_lock(self, key: str) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def get_tree(self, path: str) -> GoSource:
        """Return the parsed file at ``path``, parsing it on first use.

        Raises:
            GoParseError: If the file cannot be read or parsed
        """
        key = os.path.abspath(path)
        cached = self._trees.get(key)
        if cached is not None:
            return cached

        with self._key_lock(key):
            cached = self._trees.get(key)
            if cached is not None:
                return cached
            parsed = load_go_source(key)
            with self._lock:
                self._trees[key] = parsed
            logger.debug("Parsed Go source", path=key)
            return parsed

    def __contains__(self, path: str) -> bool:
        return os.path.abspath(path) in self._trees

    def __len__(self) -> int:
        return len(self._trees)
