"""
Swagger comment generation across a tree of Go handler files.

Usage:
    from swagcomment.config import GeneratorConfig
    from swagcomment.orchestrator import SwaggerGenerator

    generator = SwaggerGenerator(GeneratorConfig(handler_dir="./handler"))
    report = generator.run()
    print(report.total.newly_documented)

Each file is handled by one worker: its tree is fetched from the syntax
cache, handlers are classified, and undocumented handlers are rewritten from
the last declaration to the first so that offsets from the original tree stay
valid. Files are processed in parallel on a bounded thread pool.
"""

from __future__ import annotations

import fnmatch
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Mapping, Optional

from swagcomment.classifier import HandlerDescriptor, describe_handler
from swagcomment.config import GeneratorConfig
from swagcomment.exceptions import (
    GoParseError,
    HandlerDirectoryNotFoundError,
    NoHandlersFoundError,
    RouterUnreadableError,
    SpliceError,
)
from swagcomment.logging_config import LogContext, get_logger
from swagcomment.reflector import RequestTypeReflector
from swagcomment.routes import RouteRecord, extract_routes
from swagcomment.splice import insert_or_replace
from swagcomment.synthesizer import CommentSynthesizer
from swagcomment.syntax import SyntaxCache

logger = get_logger(__name__)


@dataclass
class FileStats:
    """Per-file declaration counters; addition aggregates across files."""

    total: int = 0
    handlers: int = 0
    already_documented: int = 0
    newly_documented: int = 0

    def __add__(self, other: FileStats) -> FileStats:
        return FileStats(
            total=self.total + other.total,
            handlers=self.handlers + other.handlers,
            already_documented=self.already_documented + other.already_documented,
            newly_documented=self.newly_documented + other.newly_documented,
        )

    @property
    def documented(self) -> int:
        return self.already_documented + self.newly_documented

    @property
    def coverage(self) -> float:
        """Percentage of handlers carrying a swagger block."""
        if self.handlers == 0:
            return 0.0
        return self.documented / self.handlers * 100


@dataclass
class FileResult:
    """Outcome of processing one handler file."""

    path: str
    stats: FileStats = field(default_factory=FileStats)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunReport:
    """Aggregate outcome of a generation run."""

    total: FileStats = field(default_factory=FileStats)
    results: list[FileResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)


def find_handler_files(handler_dir: str, pattern: str) -> list[str]:
    """Recursively list files under ``handler_dir`` whose basename matches ``pattern``.

    Raises:
        HandlerDirectoryNotFoundError: If ``handler_dir`` is not a directory
    """
    if not os.path.isdir(handler_dir):
        raise HandlerDirectoryNotFoundError(handler_dir)

    matches = []
    for root, _dirs, files in os.walk(handler_dir):
        for name in files:
            if fnmatch.fnmatch(name, pattern):
                matches.append(os.path.join(root, name))
    return sorted(matches)


def load_route_table(config: GeneratorConfig) -> dict[str, RouteRecord]:
    """Extract routes from the configured router file; empty if unreadable."""
    try:
        return extract_routes(config.router_file, config.authorized_group, config.public_group)
    except RouterUnreadableError as e:
        logger.warning(
            "Could not extract routes from router file, using handler name analysis",
            router_file=config.router_file,
            error=e.reason,
        )
        return {}


class SwaggerGenerator:
    """Generates swagger comments for every handler file of a configuration.

    The route table is built once at construction. The syntax cache and the
    request-type reflector live for the generator's lifetime; create a new
    generator for each pass over files that may have been rewritten.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        routes: Optional[Mapping[str, RouteRecord]] = None,
    ):
        self.config = config
        self.routes: Mapping[str, RouteRecord] = (
            routes if routes is not None else load_route_table(config)
        )
        self.syntax_cache = SyntaxCache()
        self.reflector = RequestTypeReflector(config.types_paths, self.syntax_cache)
        self.synthesizer = CommentSynthesizer(
            self.routes,
            self.reflector,
            security_scheme=config.security_scheme,
            api_prefix=config.api_prefix,
        )

    def collect_handlers(self, path: str, stats: FileStats) -> list[HandlerDescriptor]:
        """Classify the declarations of ``path`` and return handlers needing a comment.

        Raises:
            GoParseError: If the file cannot be parsed
        """
        source = self.syntax_cache.get_tree(path)
        pending = []
        for decl in source.function_declarations():
            stats.total += 1
            handler = describe_handler(decl)
            if handler is None:
                continue
            stats.handlers += 1
            if handler.documented:
                stats.already_documented += 1
                logger.debug("Already has swagger comment", handler=handler.name)
                continue
            pending.append(handler)
        return pending

    def process_file(self, path: str) -> FileResult:
        """Document every undocumented handler in one file."""
        result = FileResult(path=path)
        with LogContext(source_file=os.path.basename(path)):
            try:
                pending = self.collect_handlers(path, result.stats)
            except GoParseError as e:
                logger.error("Error processing file", path=path, error=e.reason)
                result.error = e
                return result

            for handler in reversed(pending):
                comment = self.synthesizer.synthesize(handler)
                if self.config.dry_run:
                    logger.info("Would add comment", handler=handler.name, comment=comment)
                    result.stats.newly_documented += 1
                    continue

                try:
                    insert_or_replace(path, handler.decl, comment)
                except SpliceError as e:
                    logger.error(
                        "Error updating comment", handler=handler.name, error=e.reason
                    )
                    continue

                result.stats.newly_documented += 1
                if self.config.verbose:
                    logger.info("Generated comment", handler=handler.name)
        return result

    def _log_config(self, file_count: int) -> None:
        config = self.config
        logger.info(
            "Configuration",
            handler_dir=config.handler_dir,
            router_file=config.router_file,
            handler_pattern=config.handler_pattern,
            api_prefix=config.api_prefix,
            security_scheme=config.security_scheme,
            concurrency=config.concurrency,
            types_paths=",".join(config.types_paths),
            routes=len(self.routes),
            files=file_count,
        )

    def _log_file_stats(self, result: FileResult, processed: int, failed: int) -> None:
        stats = result.stats
        logger.info(
            "Processed file",
            file=os.path.basename(result.path),
            total=stats.total,
            handlers=stats.handlers,
            already_documented=stats.already_documented,
            newly_documented=stats.newly_documented,
            coverage=f"{stats.coverage:.1f}%",
        )
        logger.info(
            "Progress",
            processed=processed,
            successful=processed - failed,
            failed=failed,
        )

    def run(self) -> RunReport:
        """Process all handler files on a bounded worker pool.

        Raises:
            HandlerDirectoryNotFoundError: If the handler directory is missing
            NoHandlersFoundError: If no handler files match the pattern
        """
        files = find_handler_files(self.config.handler_dir, self.config.handler_pattern)
        if not files:
            raise NoHandlersFoundError(self.config.handler_dir, self.config.handler_pattern)

        if self.config.verbose:
            self._log_config(len(files))

        report = RunReport()
        with ThreadPoolExecutor(max_workers=self.config.concurrency) as executor:
            futures = [executor.submit(self.process_file, path) for path in files]
            for future in futures:
                result = future.result()
                report.results.append(result)
                if result.ok:
                    report.total = report.total + result.stats
                if self.config.verbose:
                    self._log_file_stats(result, len(report.results), report.failed)

        if self.config.verbose:
            logger.info("Request types looked up", types=len(self.reflector.cached_names()))
        if report.failed:
            logger.warning(
                "Completed with errors", failed=report.failed, successful=report.succeeded
            )
        return report
