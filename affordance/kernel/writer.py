"""
Affordance Kernel — Conditional File Writer

write_if_changed only touches a file when its content actually differs, so
watch-mode build tools see no spurious modification times.

File IO runs in a worker thread via asyncio.to_thread. There is no locking:
two concurrent writers on the same path race at the OS level, and callers
that need exclusivity must serialize externally.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from affordance.kernel.codegen import to_code
from affordance.kernel.collection import CollectionDefinition
from affordance.kernel.types import CodegenOptions, WriteResult

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


async def write_if_changed(file_path: str | Path, content: str) -> WriteResult:
    """
    Write `content` to `file_path` unless the file already holds exactly
    that content. Missing parent directories are created.

    Returns WriteResult with reason 'created', 'updated' or 'unchanged'.
    Filesystem errors other than not-found propagate.
    """
    path = Path(file_path)

    try:
        existing = await asyncio.to_thread(_read, path)
    except FileNotFoundError:
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(_write, path, content)
        logger.info("Created %s", path)
        return WriteResult(written=True, reason="created", file_path=str(file_path))

    if existing == content:
        logger.debug("Unchanged %s", path)
        return WriteResult(written=False, reason="unchanged", file_path=str(file_path))

    await asyncio.to_thread(_write, path, content)
    logger.info("Updated %s", path)
    return WriteResult(written=True, reason="updated", file_path=str(file_path))


async def generate_and_write(
    collection: CollectionDefinition,
    file_path: str | Path,
    options: CodegenOptions | None = None,
) -> WriteResult:
    """to_code + write_if_changed."""
    return await write_if_changed(file_path, to_code(collection, options))


def _read(path: Path) -> str:
    with path.open(encoding=ENCODING, newline="") as f:
        return f.read()


def _write(path: Path, content: str) -> None:
    # newline="" on both sides: no newline translation, so re-reads compare equal.
    with path.open("w", encoding=ENCODING, newline="") as f:
        f.write(content)
