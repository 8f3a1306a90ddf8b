"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_UPLOAD_BYTES = 10 << 20


@dataclass(slots=True)
class AppConfig:
    host: str = "127.0.0.1"
    port: int = 8080
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    def __post_init__(self) -> None:
        if self.max_upload_bytes <= 0:
            raise ValueError("max_upload_bytes must be positive")
        if not 0 < self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}")
