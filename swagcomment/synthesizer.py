"""
Swagger doc-comment synthesis for handler methods.

Routes come from the router table when the handler is registered there;
otherwise method, path and security are inferred from the handler name:

    DeleteProduct -> DELETE /product/{id}  (secured)
    ListOrders    -> GET    /orders        (secured)
    Login         -> GET    /login         (public)
"""

from __future__ import annotations

import re
from typing import Mapping

from swagcomment.classifier import HandlerDescriptor
from swagcomment.reflector import RequestTypeReflector
from swagcomment.routes import RouteRecord

CAMEL_CASE_RE = re.compile(r"([a-z0-9])([A-Z])")
PATH_PARAM_RE = re.compile(r"\{([^}]+)\}")

# Leading kebab segments dropped when deriving a path from a handler name
PATH_PREFIXES = ("get-", "list-", "create-", "update-", "delete-", "handle-")

# Handler name fragments marking anonymous endpoints
PUBLIC_PATTERNS = ("Login", "Register", "Captcha", "Public")

METHOD_PREFIXES = (
    (("Create", "Add"), "post"),
    (("Update", "Modify"), "put"),
    (("Patch", "Partial"), "patch"),
    (("Delete", "Remove"), "delete"),
)

FAILURE_LINES = (
    '@Failure 400 {object} types.Response "Bad request"',
    '@Failure 401 {object} types.Response "Unauthorized"',
    '@Failure 500 {object} types.Response "Internal server error"',
)


def split_camel_case(name: str, separator: str = " ") -> str:
    return CAMEL_CASE_RE.sub(rf"\1{separator}\2", name)


def determine_http_method(handler_name: str) -> str:
    """Infer the HTTP verb from the handler name prefix (default ``get``)."""
    for prefixes, method in METHOD_PREFIXES:
        if handler_name.startswith(prefixes):
            return method
    return "get"


def _is_single_get(handler_name: str) -> bool:
    return handler_name.startswith("Get") and not handler_name.startswith("List")


def determine_path(handler_name: str) -> str:
    """Infer the URL path from the handler name."""
    path = split_camel_case(handler_name, "-").lower()
    for prefix in PATH_PREFIXES:
        path = path.removeprefix(prefix)

    if (
        "ById" in handler_name
        or _is_single_get(handler_name)
        or handler_name.startswith(("Update", "Delete"))
    ):
        resource = path.split("-by-id")[0]
        return f"/{resource}/{{id}}"

    if handler_name.startswith("List"):
        return "/" + path.removeprefix("list-")

    return "/" + path


def is_likely_secured(handler_name: str) -> bool:
    return not any(pattern in handler_name for pattern in PUBLIC_PATTERNS)


def infer_route(handler_name: str) -> RouteRecord:
    """Synthesize a route for a handler the router does not register."""
    return RouteRecord(
        path=determine_path(handler_name),
        method=determine_http_method(handler_name),
        handler=handler_name,
        secured=is_likely_secured(handler_name),
    )


def resolve_route(
    handler_name: str,
    routes: Mapping[str, RouteRecord],
    api_prefix: str = "",
) -> RouteRecord:
    """Resolve a handler's route, preferring the router table.

    A non-empty ``api_prefix`` is prepended to paths that lack it.
    """
    route = routes.get(handler_name) or infer_route(handler_name)
    if api_prefix and not route.path.startswith(api_prefix):
        route = RouteRecord(
            path=api_prefix + route.path,
            method=route.method,
            handler=route.handler,
            secured=route.secured,
        )
    return route


def generate_summary(handler_name: str) -> str:
    return split_camel_case(handler_name)


def generate_description(handler_name: str) -> str:
    """Describe the handler, e.g. ``CreateUser`` -> ``Creates a new User``."""
    desc = split_camel_case(handler_name)

    if handler_name.startswith("Create"):
        prefix = "Creates a new "
    elif _is_single_get(handler_name):
        prefix = "Retrieves a single "
    elif handler_name.startswith("List"):
        prefix = "Retrieves a list of "
    elif handler_name.startswith("Update"):
        prefix = "Updates an existing "
    elif handler_name.startswith("Delete"):
        prefix = "Deletes an existing "
    else:
        return desc

    first_word = desc.split(" ")[0]
    return prefix + desc.removeprefix(first_word + " ")


def determine_tag(receiver_type: str) -> str:
    return receiver_type.removesuffix("Handler").lower()


def determine_status_code(method: str) -> int:
    if method == "post":
        return 201
    if method == "delete":
        return 204
    return 200


class CommentSynthesizer:
    """Builds the swagger comment block for handlers of one run."""

    def __init__(
        self,
        routes: Mapping[str, RouteRecord],
        reflector: RequestTypeReflector,
        security_scheme: str = "BearerAuth",
        api_prefix: str = "",
    ):
        self.routes = routes
        self.reflector = reflector
        self.security_scheme = security_scheme
        self.api_prefix = api_prefix

    def _param_lines(self, handler_name: str, route: RouteRecord) -> list[str]:
        req_type = f"types.{handler_name}Req"
        uri_params = self.reflector.find_request_type(req_type)

        lines = []
        for name in PATH_PARAM_RE.findall(route.path):
            param = uri_params.get(name)
            if param is not None:
                kind, required = param.kind, param.required
            else:
                kind = "integer" if name == "id" or name.endswith("_id") else "string"
                required = True
            lines.append(f'@Param {name} path {kind} {str(required).lower()} "{name}"')

        if route.method == "get":
            location, required_text = "query", "false"
        else:
            location, required_text = "body", "true"
        lines.append(f'@Param req {location} {req_type} {required_text} "req"')
        return lines

    def synthesize(self, handler: HandlerDescriptor) -> str:
        """Return the full ``// ``-prefixed comment block, newline terminated.

        Also records the resolved route on ``handler``.
        """
        name = handler.name
        route = resolve_route(name, self.routes, self.api_prefix)
        handler.route = route

        lines = [
            f"{name} godoc",
            f"@Summary {generate_summary(name)}",
            f"@Description {generate_description(name)}",
            f"@Tags {determine_tag(handler.receiver_type)}",
            "@Accept json",
            "@Produce json",
        ]
        lines.extend(self._param_lines(name, route))
        lines.append(
            f"@Success {determine_status_code(route.method)} {{object}} "
            f'types.Response{{data=types.{name}Resp}} "Success"'
        )
        lines.extend(FAILURE_LINES)
        if route.secured:
            lines.append(f"@Security {self.security_scheme}")
        lines.append(f"@Router {route.path} [{route.method}]")

        return "".join(f"// {line}\n" for line in lines)
