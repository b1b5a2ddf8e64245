"""
Route table extraction from a Go router source.

The router is scanned as plain text for registration call sites of the form

    <group>.<VERB>("<pattern>", <receiver>.<handler>)

where ``<group>`` is either the authenticated or the anonymous group
identifier. Gin-style ``:name`` segments are rewritten to ``{name}``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from swagcomment.exceptions import RouterUnreadableError

HTTP_VERBS = ("GET", "POST", "PUT", "PATCH", "DELETE")

ROUTER_PARAM_RE = re.compile(r":([^/]+)")


@dataclass(frozen=True)
class RouteRecord:
    """An API route bound to a handler function."""

    path: str
    method: str
    handler: str
    secured: bool


def route_pattern(authorized_group: str = "authorized", public_group: str = "api") -> re.Pattern[str]:
    """Compile the registration regex for the given router group identifiers."""
    groups = "|".join(re.escape(g) for g in (public_group, authorized_group))
    verbs = "|".join(HTTP_VERBS)
    return re.compile(
        rf"\b({groups})\.({verbs})\(\s*\"([^\"]+)\",\s*([A-Za-z0-9_]+)\.([A-Za-z0-9_]+)\s*\)"
    )


def canonical_path(pattern: str) -> str:
    """Rewrite ``:name`` placeholders to ``{name}``."""
    return ROUTER_PARAM_RE.sub(r"{\1}", pattern)


def parse_routes(
    source: str,
    authorized_group: str = "authorized",
    public_group: str = "api",
) -> dict[str, RouteRecord]:
    """Build the handler-name to route mapping from router source text.

    When a handler is registered more than once the last registration wins.
    """
    routes: dict[str, RouteRecord] = {}
    for match in route_pattern(authorized_group, public_group).finditer(source):
        group, verb, pattern, _receiver, handler = match.groups()
        routes[handler] = RouteRecord(
            path=canonical_path(pattern),
            method=verb.lower(),
            handler=handler,
            secured=group == authorized_group,
        )
    return routes


def extract_routes(
    router_file: str,
    authorized_group: str = "authorized",
    public_group: str = "api",
) -> dict[str, RouteRecord]:
    """Read the router file and extract its route table.

    Raises:
        RouterUnreadableError: If the router file cannot be read
    """
    try:
        with open(router_file, encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise RouterUnreadableError(router_file, str(e)) from e
    return parse_routes(content, authorized_group, public_group)
