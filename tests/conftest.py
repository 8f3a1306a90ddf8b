"""Shared fixtures building inventory archives in memory."""

from __future__ import annotations

import gzip
import io
import json
import tarfile
from typing import Callable, Dict, List, Optional

import pytest

from syscatalog.ingestion.manifest import MACHINE_ID_PATH, MANIFEST_PATH

WRAPPER = "insights-host-20240101"


def _component(index: int) -> Dict[str, str]:
    return {
        "name": f"package-{index}",
        "epoch": "(none)",
        "version": f"1.{index}.0",
        "release": "1.el9",
        "arch": "x86_64",
        "installtime": "Mon 01 Jan 2024 12:00:00 PM UTC",
        "buildtime": "1700000000",
        "vendor": "Red Hat, Inc.",
        "buildhost": "build.example.com",
        "sigpgp": "RSA/SHA256, Key ID 199e2f91fd431d51",
    }


def _build_archive(files: Dict[str, Optional[bytes]], wrapper: str = WRAPPER) -> bytes:
    """Tar and gzip ``files``; a ``None`` value adds a directory entry."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for path, content in files.items():
            name = f"{wrapper}/{path}" if wrapper else path
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                archive.addfile(info)
                continue
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def component() -> Callable[[int], Dict[str, str]]:
    return _component


@pytest.fixture
def manifest_lines() -> Callable[[int], List[str]]:
    def build(count: int) -> List[str]:
        return [json.dumps(_component(index)) for index in range(count)]

    return build


@pytest.fixture
def build_archive() -> Callable[..., bytes]:
    return _build_archive


@pytest.fixture
def inventory_archive(manifest_lines) -> Callable[..., bytes]:
    """Build a complete inventory archive with ``count`` packages."""

    def build(count: int = 3, machine_id: bytes = b"abc123\n") -> bytes:
        manifest = "".join(line + "\n" for line in manifest_lines(count)).encode()
        return _build_archive(
            {
                "etc": None,
                "etc/insights-client": None,
                MACHINE_ID_PATH: machine_id,
                MANIFEST_PATH: manifest,
            }
        )

    return build


@pytest.fixture
def gzip_bytes() -> Callable[[bytes], bytes]:
    return gzip.compress


@pytest.fixture
def tar_member() -> Callable[[str, bytes], bytes]:
    """Raw tar blocks (header, data, padding) for one regular file under the wrapper."""

    def build(path: str, content: bytes) -> bytes:
        info = tarfile.TarInfo(f"{WRAPPER}/{path}")
        info.size = len(content)
        return info.tobuf() + content + b"\0" * (-len(content) % tarfile.BLOCKSIZE)

    return build
