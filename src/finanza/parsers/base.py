"""Parser errors."""

from pathlib import Path
from typing import Optional


class ParseError(Exception):
    """Exception raised when file content cannot be decoded at all."""

    def __init__(self, message: str, file_path: Optional[Path] = None):
        """Initialize ParseError.

        Args:
            message: Error message.
            file_path: Optional path to the file that failed to parse.
        """
        self.file_path = file_path
        super().__init__(message)
