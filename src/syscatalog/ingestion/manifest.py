"""Locate and decode the package manifest of an extracted inventory archive.

The manifest is the output of an ``rpm -qa --qf`` query that prints one JSON
object per installed package. Each line must carry exactly the ten component
fields as strings; anything else aborts the parse so that corrupted uploads
never reach the catalog half-read.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, ValidationError

from syscatalog.exceptions import (
    MissingIdentifierError,
    MissingManifestError,
    RecordDecodeError,
)
from syscatalog.models import ComponentRecord, SystemCatalogEntry

LOGGER = logging.getLogger(__name__)

MACHINE_ID_PATH = "etc/insights-client/machine-id"
MANIFEST_PATH = (
    "insights_commands/rpm_-qa_--qf_name_NAME_epoch_EPOCH_version_VERSION_release_RELEASE"
    "_arch_ARCH_installtime_INSTALLTIME_date_buildtime_BUILDTIME_vendor_VENDOR"
    "_buildhost_BUILDHOST_sigpgp_SIGPGP_pgpsig_n"
)


class ComponentLine(BaseModel):
    """Wire shape of a single manifest line."""

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    name: str
    epoch: str
    version: str
    release: str
    arch: str
    installtime: str
    buildtime: str
    vendor: str
    buildhost: str
    sigpgp: str

    def to_record(self) -> ComponentRecord:
        return ComponentRecord(**self.model_dump())


def iter_lines(content: bytes) -> Iterator[Tuple[int, bytes]]:
    """Yield ``(line_number, line)`` for each non-blank line, numbered from 1."""
    for number, line in enumerate(content.split(b"\n"), start=1):
        if line.endswith(b"\r"):
            line = line[:-1]
        if not line.strip():
            continue
        yield number, line


def decode_component(line_number: int, line: bytes) -> ComponentRecord:
    try:
        return ComponentLine.model_validate_json(line).to_record()
    except ValidationError as exc:
        raise RecordDecodeError(
            f"Error decoding component: {exc.error_count()} validation error(s)",
            line_number=line_number,
            line=line.decode("utf-8", errors="replace"),
        ) from exc


def parse_components(content: bytes) -> List[ComponentRecord]:
    """Decode every manifest line, in order, failing on the first bad one."""
    return [decode_component(number, line) for number, line in iter_lines(content)]


def parse(files: Mapping[str, bytes]) -> SystemCatalogEntry:
    """Build the catalog entry for one extracted archive."""
    try:
        machine_id = files[MACHINE_ID_PATH]
    except KeyError:
        raise MissingIdentifierError(f"Failed to find machine ID at {MACHINE_ID_PATH}") from None

    try:
        manifest = files[MANIFEST_PATH]
    except KeyError:
        raise MissingManifestError("Failed to find package list file") from None

    components = parse_components(manifest)
    LOGGER.debug("Decoded %d components", len(components))
    return SystemCatalogEntry(
        system_id=machine_id.decode("utf-8", errors="replace"),
        components=tuple(components),
    )
