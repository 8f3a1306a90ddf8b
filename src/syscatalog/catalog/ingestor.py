"""Archive ingestion pipeline."""

from __future__ import annotations

import logging
from typing import BinaryIO

from syscatalog.catalog.store import CatalogStore
from syscatalog.ingestion.archive import extract
from syscatalog.ingestion.manifest import parse

LOGGER = logging.getLogger(__name__)


class CatalogIngestor:
    """Coordinates archive extraction, manifest parsing and catalog updates."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def ingest(self, stream: BinaryIO) -> None:
        """Add the system described by ``stream`` to the catalog.

        Any :class:`~syscatalog.exceptions.IngestionError` propagates unchanged
        and leaves the catalog untouched.
        """
        files = extract(stream)
        entry = parse(files)
        self.store.append(entry)
        LOGGER.info(
            "Ingested system %s with %d components",
            entry.system_id.strip(),
            len(entry.components),
        )
