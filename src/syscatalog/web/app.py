"""FastAPI application exposing archive upload and catalog listing."""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Any

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from syscatalog.catalog.ingestor import CatalogIngestor
from syscatalog.catalog.store import CatalogStore
from syscatalog.config import AppConfig
from syscatalog.exceptions import (
    ArchiveFormatError,
    DecompressionError,
    IngestionError,
    MissingIdentifierError,
    MissingManifestError,
    RecordDecodeError,
)

LOGGER = logging.getLogger(__name__)


def _error_response(exc: IngestionError) -> HTTPException:
    if isinstance(exc, DecompressionError):
        return HTTPException(status_code=400, detail=f"Unable to decompress file: {exc}")
    if isinstance(exc, ArchiveFormatError):
        return HTTPException(status_code=400, detail=f"Error while extracting tarball: {exc}")
    if isinstance(exc, (MissingIdentifierError, MissingManifestError, RecordDecodeError)):
        return HTTPException(status_code=422, detail=f"Failed to extract components: {exc}")
    return HTTPException(status_code=500, detail=str(exc))


async def _read_upload(file: UploadFile | None, limit: int) -> bytes:
    if file is None:
        raise HTTPException(status_code=400, detail="No files uploaded")
    # The multipart body is already spooled by Starlette at this point; the
    # limit caps what is handed to ingestion, not what the server receives.
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise HTTPException(
            status_code=413, detail=f"Upload exceeds the {limit} byte limit"
        )
    return data


async def _ingest_upload(request: Request, file: UploadFile | None) -> PlainTextResponse:
    config: AppConfig = request.app.state.config
    ingestor: CatalogIngestor = request.app.state.ingestor

    data = await _read_upload(file, config.max_upload_bytes)
    try:
        await asyncio.to_thread(ingestor.ingest, io.BytesIO(data))
    except IngestionError as exc:
        LOGGER.warning("Rejected upload %s: %s", file.filename, exc)
        raise _error_response(exc) from exc

    return PlainTextResponse(f"File {file.filename} uploaded successfully!\n")


def create_app(config: AppConfig | None = None, store: CatalogStore | None = None) -> FastAPI:
    """Build the web application around a catalog store."""
    config = config or AppConfig()
    store = store if store is not None else CatalogStore()

    app = FastAPI(title="syscatalog", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config
    app.state.store = store
    app.state.ingestor = CatalogIngestor(store)

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    @app.post("/upload", response_class=PlainTextResponse)
    async def upload_archive(
        request: Request, file: UploadFile | None = File(None)
    ) -> PlainTextResponse:
        return await _ingest_upload(request, file)

    @app.post("/upload/{machine_id}", response_class=PlainTextResponse)
    async def upload_archive_for_machine(
        machine_id: str, request: Request, file: UploadFile | None = File(None)
    ) -> PlainTextResponse:
        LOGGER.debug("Upload addressed to machine %s", machine_id)
        return await _ingest_upload(request, file)

    @app.get("/list")
    async def list_systems(request: Request) -> dict[str, Any]:
        """Return every ingested system with its components."""
        return request.app.state.store.to_dict()

    return app


app = create_app()
