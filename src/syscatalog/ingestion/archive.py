"""In-memory extraction of gzip-compressed tar archives."""

from __future__ import annotations

import gzip
import io
import logging
import tarfile
import zlib
from typing import BinaryIO, Dict

from syscatalog.exceptions import ArchiveFormatError, DecompressionError

LOGGER = logging.getLogger(__name__)

FileSet = Dict[str, bytes]


def decompress(stream: BinaryIO) -> bytes:
    """Read the whole gzip stream and return the decompressed payload."""
    raw = stream.read()
    if not raw:
        raise DecompressionError("Empty upload")
    try:
        return gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressionError(str(exc) or exc.__class__.__name__) from exc


def strip_root(name: str) -> str:
    """Drop the archive's top-level wrapper directory from a member name."""
    parts = name.split("/", 1)
    if len(parts) != 2:
        raise ArchiveFormatError(f"Entry {name!r} is not inside a top-level directory")
    return parts[1]


def extract(stream: BinaryIO) -> FileSet:
    """Return every regular file of the archive keyed by its root-stripped path.

    Directories, links and special files are skipped. A later member with the
    same path replaces an earlier one.
    """
    payload = decompress(stream)

    files: FileSet = {}
    try:
        with tarfile.open(fileobj=io.BytesIO(payload), mode="r:") as archive:
            for member in archive:
                if not member.isreg():
                    LOGGER.debug("Skipping non-regular entry %s", member.name)
                    continue
                key = strip_root(member.name)
                handle = archive.extractfile(member)
                if handle is None:  # pragma: no cover - isreg() members always have data
                    continue
                with handle:
                    files[key] = handle.read()
            # tarfile stops quietly at a bad header after the first member;
            # only end-of-archive zero blocks may follow the last member read.
            if payload[archive.offset:].strip(b"\0"):
                raise ArchiveFormatError(
                    f"Malformed or truncated tar header at offset {archive.offset}"
                )
    except tarfile.TarError as exc:
        raise ArchiveFormatError(str(exc)) from exc

    return files
