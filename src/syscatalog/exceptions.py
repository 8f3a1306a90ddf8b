"""Error types raised by the ingestion pipeline."""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for every failure that aborts an ingestion."""


class DecompressionError(IngestionError):
    """The upload is not a readable gzip stream."""


class ArchiveFormatError(IngestionError):
    """The decompressed payload is not a well-formed tar archive."""


class MissingIdentifierError(IngestionError):
    """The archive has no machine-id file."""


class MissingManifestError(IngestionError):
    """The archive has no package manifest file."""


class RecordDecodeError(IngestionError):
    """A manifest line could not be decoded into a component record."""

    def __init__(self, message: str, *, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"{message} (line {line_number}: {line!r})")
