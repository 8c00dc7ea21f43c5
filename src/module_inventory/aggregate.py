"""Dependency Aggregator: fold ReferenceRecords into a module-keyed index."""

from collections.abc import Iterable

from .scanning.models import DependencyIndex, ReferenceRecord


def aggregate(records: Iterable[ReferenceRecord], unique: bool = False) -> DependencyIndex:
    """Map each module name to the files that reference it.

    Keys and file lists keep the order in which records arrive. Without
    ``unique`` a file is listed once per occurrence, so the total number of
    list entries equals the number of records.

    Args:
        records: Every record from the whole tree
        unique: List a file at most once per module

    Returns:
        Mapping of module name to referencing files
    """
    index: DependencyIndex = {}
    seen: set[tuple[str, str]] = set()

    for record in records:
        if unique:
            key = (record.module, record.source_file)
            if key in seen:
                continue
            seen.add(key)
        index.setdefault(record.module, []).append(record.source_file)

    return index
