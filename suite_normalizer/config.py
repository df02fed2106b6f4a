from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .models import SchemaRevision


@dataclass(frozen=True)
class Config:
    schema_revision: SchemaRevision = SchemaRevision.CURRENT
    log_level: str = "INFO"
    max_upload_bytes: int = 1024 * 1024


def load_config_from_env() -> Config:
    def choice(name: str, default: str, allowed) -> str:
        v = os.getenv(name, default)
        if v not in allowed:
            raise RuntimeError(f"Invalid value for {name}: {v!r} (expected one of {sorted(allowed)})")
        return v

    revision = choice(
        "SUITE_NORMALIZER_SCHEMA", "current", {r.value for r in SchemaRevision}
    )
    level = choice(
        "SUITE_NORMALIZER_LOG_LEVEL",
        "INFO",
        {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"},
    )

    max_upload = os.getenv("SUITE_NORMALIZER_MAX_UPLOAD_BYTES", str(1024 * 1024))
    try:
        max_upload_bytes = int(max_upload)
    except ValueError:
        raise RuntimeError(
            f"Invalid value for SUITE_NORMALIZER_MAX_UPLOAD_BYTES: {max_upload!r}"
        ) from None

    return Config(
        schema_revision=SchemaRevision(revision),
        log_level=level,
        max_upload_bytes=max_upload_bytes,
    )


def configure_logging(cfg: Config, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, cfg.log_level),
        format="%(levelname)s: %(message)s",
    )
