"""
swagcomment: Swagger doc-comment generator for Go HTTP handlers.

Scans Go handler files, infers each handler's route, path parameters,
security and tag from the router registrations and request structs, and
writes a swag-style comment block above every undocumented handler.

    from swagcomment import GeneratorConfig, SwaggerGenerator

    report = SwaggerGenerator(GeneratorConfig(handler_dir="./handler")).run()
"""

from swagcomment.__version__ import __version__
from swagcomment.config import GeneratorConfig, resolve_config
from swagcomment.exceptions import (
    ConfigurationError,
    DiscoveryError,
    GoParseError,
    HandlerDirectoryNotFoundError,
    NoHandlersFoundError,
    RouterUnreadableError,
    SpliceError,
    SwagCommentError,
    TypeSourceUnreadableError,
)
from swagcomment.orchestrator import FileResult, FileStats, RunReport, SwaggerGenerator
from swagcomment.reflector import PathParam, RequestTypeReflector
from swagcomment.routes import RouteRecord, extract_routes, parse_routes
from swagcomment.synthesizer import CommentSynthesizer
from swagcomment.syntax import SyntaxCache

__all__ = [
    "__version__",
    "GeneratorConfig",
    "resolve_config",
    "SwaggerGenerator",
    "FileStats",
    "FileResult",
    "RunReport",
    "RouteRecord",
    "extract_routes",
    "parse_routes",
    "PathParam",
    "RequestTypeReflector",
    "CommentSynthesizer",
    "SyntaxCache",
    "SwagCommentError",
    "ConfigurationError",
    "DiscoveryError",
    "GoParseError",
    "HandlerDirectoryNotFoundError",
    "NoHandlersFoundError",
    "RouterUnreadableError",
    "SpliceError",
    "TypeSourceUnreadableError",
]
