"""
Atomic in-place insertion of doc comments into Go source files.

The new file is ``[0, doc_start)`` + block + ``[func_start, EOF)`` of the
original: an existing doc block is replaced, everything else is kept byte for
byte. Content is streamed into a sibling temp file which is renamed over the
target, so a failure leaves the original untouched.

Offsets come from a tree parsed before any rewrite. When several handlers in
one file are rewritten, apply them from the last declaration to the first.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from typing import BinaryIO

from swagcomment.exceptions import SpliceError
from swagcomment.syntax import FuncDecl

TEMP_PREFIX = "swagger-comment-"
CHUNK_SIZE = 64 * 1024


def _copy_bytes(src: BinaryIO, dst: BinaryIO, count: int) -> None:
    remaining = count
    while remaining > 0:
        chunk = src.read(min(CHUNK_SIZE, remaining))
        if not chunk:
            raise EOFError(f"source ended {remaining} bytes early")
        dst.write(chunk)
        remaining -= len(chunk)


def splice_file(
    file_path: str,
    doc_start: int,
    func_start: int,
    block: str,
    handler: str = "",
) -> None:
    """Replace ``[doc_start, func_start)`` of ``file_path`` with ``block``.

    Raises:
        SpliceError: If the rewrite fails; the original file is unchanged
    """
    if not 0 <= doc_start <= func_start:
        raise ValueError(f"invalid splice range [{doc_start}, {func_start})")

    directory = os.path.dirname(os.path.abspath(file_path))
    tmp_path = None
    try:
        with open(file_path, "rb") as src, tempfile.NamedTemporaryFile(
            mode="wb", dir=directory, prefix=TEMP_PREFIX, suffix=".go", delete=False
        ) as tmp:
            tmp_path = tmp.name
            _copy_bytes(src, tmp, doc_start)
            tmp.write(block.encode("utf-8"))
            src.seek(func_start)
            shutil.copyfileobj(src, tmp, CHUNK_SIZE)
            tmp.flush()
            os.fsync(tmp.fileno())
        shutil.copymode(file_path, tmp_path)
        os.replace(tmp_path, file_path)
        tmp_path = None
    except (OSError, EOFError) as e:
        raise SpliceError(file_path, handler or "declaration", str(e)) from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.unlink(tmp_path)


def insert_or_replace(file_path: str, decl: FuncDecl, block: str) -> None:
    """Write ``block`` as the doc comment of ``decl`` in ``file_path``.

    Raises:
        SpliceError: If the rewrite fails; the original file is unchanged
    """
    splice_file(file_path, decl.doc_start_byte, decl.start_byte, block, handler=decl.name)
