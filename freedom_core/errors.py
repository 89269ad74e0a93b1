"""Ingestion error hierarchy.

Rows never fail individually; these errors abort a whole upload and leave
the previously loaded collection untouched.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base exception for a failed upload."""


class ReadFailure(IngestionError):
    """Raised when the uploaded bytes could not be read."""


class DecodeFailure(IngestionError):
    """Raised when the bytes are not a spreadsheet the decoder understands."""


class UnsupportedFileType(IngestionError):
    """Raised for file names outside the accepted spreadsheet extensions."""
