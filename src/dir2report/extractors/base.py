"""Base class for per-format content extractors."""

from abc import ABC, abstractmethod
from pathlib import Path


class ContentExtractor(ABC):
    """Interface for turning one file into text for the report.

    Implementations raise ExtractionError for failures that concern only the file
    being extracted; the report generator renders those as a read error for that file
    and carries on with the next one.
    """

    @abstractmethod
    def extract(self, path: Path) -> str:
        """Extract the textual content of a file.

        Args:
            path: Absolute path to the file.

        Returns:
            The text to embed in the report.

        Raises:
            ExtractionError: If the file's content cannot be extracted.
        """
        pass
