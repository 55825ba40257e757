from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .api import GamePlatformAPI
from .remote import HttpRemoteClient


def _get_env(source: Mapping[str, str], name: str, default: Optional[str] = None) -> str:
    val = source.get(name, default)
    if val is None or val.strip() == "":
        raise RuntimeError(f"Missing required environment variable: {name}")
    return val.strip()


def _get_seconds(source: Mapping[str, str], name: str, default: float) -> float:
    raw = (source.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number of seconds.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return value


@dataclass(frozen=True)
class ClientSettings:
    api_url: str
    timeout: float = 10.0
    submit_timeout: float = 60.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        """Read settings from ``environ``, or from the process environment plus ``.env``."""
        if environ is None:
            load_dotenv()
            environ = os.environ

        return cls(
            api_url=_get_env(environ, "EDUGAME_API_URL").rstrip("/"),
            timeout=_get_seconds(environ, "EDUGAME_TIMEOUT", 10.0),
            submit_timeout=_get_seconds(environ, "EDUGAME_SUBMIT_TIMEOUT", 60.0),
            log_level=_get_env(environ, "EDUGAME_LOG_LEVEL", "INFO").upper(),
        )

    def build_api(self, **client_options) -> GamePlatformAPI:
        client = HttpRemoteClient(self.api_url, timeout=self.timeout, **client_options)
        return GamePlatformAPI(client, submit_timeout=self.submit_timeout)


def configure_logging(level: str = "INFO") -> logging.Logger:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    return logging.getLogger("edugame_client")
