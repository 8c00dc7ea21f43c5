"""Concurrent recursive tree walker.

Each directory is listed on a worker thread, then all of its eligible files
and subdirectories are processed concurrently and joined with
asyncio.gather before the directory's records are returned:

    walk(dir) = files(dir) records ++ walk(subdir) records, for each subdir

Blocking work (listing, reading, extraction) runs on a bounded thread pool,
which caps open file handles and in-flight extractor calls. Directory
coroutines themselves hold no thread, so deep trees cannot exhaust the pool.

Failures below the root are isolated: an unlistable subdirectory or an
unreadable/unparsable file is logged, recorded as a ScanIssue and contributes
no records. Only a failure to list the root itself propagates.
"""

from __future__ import annotations

import asyncio
import os
from concurrent.futures import Executor
from pathlib import Path
from typing import Optional

from ..exceptions import ReadError, ScanError, TraversalError
from ..logging_config import get_logger
from .models import ReferenceRecord, ScanIssue, TraversalPolicy
from .reader import FileReferenceReader, relative_name

logger = get_logger(__name__)


def list_directory(directory: Path) -> tuple[list[str], list[str]]:
    """List a directory's regular files and subdirectories, sorted by name.

    Symlinks and other entry kinds are ignored, so traversal never follows a
    link and cannot cycle.

    Raises:
        TraversalError: If the directory cannot be listed
    """
    files: list[str] = []
    dirs: list[str] = []
    try:
        with os.scandir(directory) as entries:
            for entry in entries:
                if entry.is_symlink():
                    continue
                if entry.is_file(follow_symlinks=False):
                    files.append(entry.name)
                elif entry.is_dir(follow_symlinks=False):
                    dirs.append(entry.name)
    except OSError as e:
        raise TraversalError(directory, f"OS error: {e}") from e
    return sorted(files), sorted(dirs)


class TreeWalker:
    """Walks a tree and collects ReferenceRecords from every eligible file.

    Attributes:
        issues: Problems isolated during the walk, in completion order
        files_scanned: Files whose references were extracted
    """

    def __init__(
        self,
        root: Path,
        policy: TraversalPolicy,
        reader: FileReferenceReader,
        executor: Executor,
        timeout_seconds: Optional[float] = None,
    ):
        self.root = root
        self.policy = policy
        self.reader = reader
        self.executor = executor
        self.timeout_seconds = timeout_seconds
        # Only touched from the event loop thread
        self.issues: list[ScanIssue] = []
        self.files_scanned = 0

    async def walk(self, directory: Path) -> list[ReferenceRecord]:
        """Collect records for every eligible file below directory.

        Raises:
            TraversalError: If directory itself cannot be listed
        """
        loop = asyncio.get_running_loop()
        file_names, dir_names = await loop.run_in_executor(
            self.executor, list_directory, directory
        )

        files = [directory / name for name in file_names if self.policy.includes_file(name)]
        subdirs = [directory / name for name in dir_names if self.policy.includes_dir(name)]
        logger.debug(
            f"{relative_name(directory, self.root)}: "
            f"{len(files)} files, {len(subdirs)} subdirectories"
        )

        results = await asyncio.gather(
            *(self._read_file(path) for path in files),
            *(self._walk_subdir(path) for path in subdirs),
        )
        return [record for chunk in results for record in chunk]

    async def _walk_subdir(self, directory: Path) -> list[ReferenceRecord]:
        try:
            return await self.walk(directory)
        except TraversalError as e:
            self._record_issue(directory, e)
            return []

    async def _read_file(self, filepath: Path) -> list[ReferenceRecord]:
        loop = asyncio.get_running_loop()
        started = asyncio.Event()

        def read() -> list[ReferenceRecord]:
            loop.call_soon_threadsafe(started.set)
            return self.reader.read(filepath)

        future = loop.run_in_executor(self.executor, read)
        try:
            if self.timeout_seconds is None:
                records = await future
            else:
                # Time spent queued behind other work in the pool does not count
                await started.wait()
                try:
                    records = await asyncio.wait_for(future, self.timeout_seconds)
                except asyncio.TimeoutError:
                    raise ReadError(
                        filepath, f"Read operation timed out after {self.timeout_seconds}s"
                    ) from None
        except ScanError as e:
            self._record_issue(filepath, e)
            return []

        self.files_scanned += 1
        return records

    def _record_issue(self, path: Path, error: ScanError) -> None:
        name = relative_name(path, self.root)
        logger.warning(f"Skipping {name}: {error.reason}")
        self.issues.append(ScanIssue(path=name, kind=error.kind, reason=error.reason))
