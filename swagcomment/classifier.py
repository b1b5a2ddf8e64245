"""
Handler identification.

A Go function declaration is a handler when it is a method whose receiver
type name contains ``Handler`` and which takes a ``*X.Context`` parameter.
It is already documented when its doc block carries a ``@Router`` line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node

from swagcomment.routes import RouteRecord
from swagcomment.syntax import FuncDecl, node_text

SWAGGER_MARKER = "@Router"


@dataclass
class HandlerDescriptor:
    """A recognized handler method.

    ``route`` is filled in once the handler's route has been resolved.
    """

    name: str
    receiver_type: str
    documented: bool
    decl: FuncDecl
    route: Optional[RouteRecord] = None


def _unwrap_pointer(type_node: Optional[Node]) -> Optional[Node]:
    if type_node is not None and type_node.type == "pointer_type":
        inner = type_node.named_children
        return inner[0] if inner else None
    return type_node


def receiver_type_name(decl: FuncDecl) -> str:
    """Return the receiver's type name with one pointer level stripped.

    Returns "" for plain functions, multi-receiver lists and receivers that
    are not a bare type name.
    """
    receiver = decl.receiver
    if receiver is None:
        return ""
    params = [c for c in receiver.named_children if c.type == "parameter_declaration"]
    if len(params) != 1:
        return ""
    type_node = _unwrap_pointer(params[0].child_by_field_name("type"))
    if type_node is None or type_node.type != "type_identifier":
        return ""
    return node_text(type_node)


def has_context_parameter(decl: FuncDecl) -> bool:
    """True if any parameter is a pointer to a ``X.Context`` selector type."""
    params = decl.parameters
    if params is None:
        return False
    for param in params.named_children:
        if param.type != "parameter_declaration":
            continue
        type_node = param.child_by_field_name("type")
        if type_node is None or type_node.type != "pointer_type":
            continue
        target = _unwrap_pointer(type_node)
        if target is not None and target.type == "qualified_type":
            if node_text(target.child_by_field_name("name")) == "Context":
                return True
    return False


def is_handler(decl: FuncDecl) -> bool:
    """Decide whether a declaration is an HTTP handler method."""
    if not decl.is_method:
        return False
    if "Handler" not in receiver_type_name(decl):
        return False
    return has_context_parameter(decl)


def has_swagger_comment(decl: FuncDecl) -> bool:
    return any(SWAGGER_MARKER in node_text(c) for c in decl.doc_comments)


def describe_handler(decl: FuncDecl) -> Optional[HandlerDescriptor]:
    """Build a descriptor for ``decl``, or None if it is not a handler."""
    if not is_handler(decl):
        return None
    return HandlerDescriptor(
        name=decl.name,
        receiver_type=receiver_type_name(decl),
        documented=has_swagger_comment(decl),
        decl=decl,
    )
