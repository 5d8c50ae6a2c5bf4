from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Dict
from dotenv import load_dotenv

ACCEPTED_MEDIA_TYPES: Dict[str, str] = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
}

@dataclass(frozen=True)
class AppConfig:
    model_name: str = "gemini-2.5-flash"
    max_tokens: int = 8192
    temperature: float = 0.2
    max_upload_mb: int = 20
    org_name: str = "Health Future"
    log_level: str = "INFO"
    accepted_media_types: Dict[str, str] = field(default_factory=lambda: dict(ACCEPTED_MEDIA_TYPES))

    @classmethod
    def from_env(cls) -> "AppConfig":
        # The API key is entered in the UI and deliberately not read here.
        load_dotenv()
        return cls(
            model_name=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            max_tokens=int(os.getenv("MAX_TOKENS", "8192")),
            temperature=float(os.getenv("TEMPERATURE", "0.2")),
            max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "20")),
            org_name=os.getenv("ORG_NAME", "Health Future"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024
