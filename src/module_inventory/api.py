"""Public API for module-inventory.

Example:
    >>> from module_inventory import scan
    >>>
    >>> result = scan("/path/to/project")
    >>> result.index["fs"]
    ['a.js', 'sub/b.js']
    >>>
    >>> # With customization
    >>> result = scan("/path/to/project", ScanConfig(unique=True, workers=4))
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Union

from .aggregate import aggregate
from .config import ScanConfig, resolve_target
from .logging_config import get_logger
from .scanning.extractors import ReferenceExtractor, create_extractor
from .scanning.models import ScanResult
from .scanning.reader import FileReferenceReader
from .scanning.walker import TreeWalker

logger = get_logger(__name__)


def scan(
    target: Union[str, Path],
    config: Optional[ScanConfig] = None,
    extractor: Optional[ReferenceExtractor] = None,
) -> ScanResult:
    """Scan a directory tree and index the modules its files reference.

    Args:
        target: Absolute path of the directory to scan
        config: Scan settings (defaults when omitted)
        extractor: Reference extractor; built from config.extractor when omitted

    Returns:
        ScanResult with the dependency index and any isolated issues

    Raises:
        ConfigurationError: If the target is invalid
        TraversalError: If the target directory itself cannot be listed
    """
    root = resolve_target(target)
    config = config or ScanConfig()
    extractor = extractor or create_extractor(config.extractor)

    reader = FileReferenceReader(root, extractor, config.max_file_size_bytes)

    with ThreadPoolExecutor(
        max_workers=config.max_workers, thread_name_prefix="module-inventory"
    ) as executor:
        walker = TreeWalker(
            root,
            config.policy,
            reader,
            executor,
            timeout_seconds=config.timeout_seconds,
        )
        records = asyncio.run(walker.walk(root))

    index = aggregate(records, unique=config.unique)
    result = ScanResult(
        root=root,
        index=index,
        files_scanned=walker.files_scanned,
        reference_count=len(records),
        issues=sorted(walker.issues, key=lambda issue: issue.path),
    )

    logger.info(
        f"Scan complete: {result.files_scanned} files, {result.reference_count} references, "
        f"{result.module_count} modules, {len(result.issues)} issues"
    )
    return result
