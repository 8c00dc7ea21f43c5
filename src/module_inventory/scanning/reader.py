"""File Reference Reader: one file in, its ReferenceRecords out."""

from pathlib import Path
from typing import Optional

from ..exceptions import ExtractionError, ReadError, SourceSyntaxError
from ..logging_config import get_logger
from .extractors import ReferenceExtractor
from .models import ReferenceRecord

logger = get_logger(__name__)


def relative_name(path: Path, root: Path) -> str:
    """Path relative to the scan root, with forward slashes."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


class FileReferenceReader:
    """Reads eligible files and pairs each extracted reference with the file.

    Runs on worker threads; holds no mutable state of its own.
    """

    def __init__(
        self,
        root: Path,
        extractor: ReferenceExtractor,
        max_file_size_bytes: Optional[int] = None,
    ):
        """
        Initialize reader.

        Args:
            root: Scan root, used to express file paths relative to it
            extractor: Reference extractor backend
            max_file_size_bytes: Files above this size raise ReadError
        """
        self.root = root
        self.extractor = extractor
        self.max_file_size_bytes = max_file_size_bytes

    def read(self, filepath: Path) -> list[ReferenceRecord]:
        """
        Extract the references of a single file.

        Args:
            filepath: File to read

        Returns:
            One record per reference occurrence, in extractor order

        Raises:
            ReadError: If the file cannot be opened, decoded or is too large
            ExtractionError: If the extractor cannot parse the content
        """
        name = relative_name(filepath, self.root)
        logger.info(f"Reading {name}")

        content = self._read_text(filepath)

        try:
            references = self.extractor.extract(content)
        except SourceSyntaxError as e:
            raise ExtractionError(filepath, e.reason) from e

        logger.debug(f"{name}: {len(references)} references")
        return [ReferenceRecord(module=ref, source_file=name) for ref in references]

    def _read_text(self, filepath: Path) -> str:
        try:
            if self.max_file_size_bytes is not None:
                size = filepath.stat().st_size
                if size > self.max_file_size_bytes:
                    raise ReadError(
                        filepath, f"file is {size} bytes, limit is {self.max_file_size_bytes}"
                    )
            with open(filepath, encoding="utf-8") as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise ReadError(filepath, f"Encoding error: {e}") from e
        except OSError as e:
            raise ReadError(filepath, f"OS error: {e}") from e
