"""
Affordance configuration — all environment variables in one place.

Read from environment at import time. Codegen options left unset fall back
to these values.
"""

from __future__ import annotations

import os


class Settings:
    """Library settings from environment variables."""

    # Codegen
    AFFORDANCE_CODEGEN_INDENT: int = int(os.environ.get("AFFORDANCE_CODEGEN_INDENT", "4"))
    AFFORDANCE_INLINE_WIDTH: int = int(os.environ.get("AFFORDANCE_INLINE_WIDTH", "60"))
    AFFORDANCE_EXPORT_NAME: str = os.environ.get("AFFORDANCE_EXPORT_NAME", "CONFIG")

    # Logging (CLI only; the library never configures handlers)
    AFFORDANCE_LOG_LEVEL: str = os.environ.get("AFFORDANCE_LOG_LEVEL", "WARNING").upper()


# Singleton instance
settings = Settings()

if settings.AFFORDANCE_CODEGEN_INDENT < 0:
    raise RuntimeError("AFFORDANCE_CODEGEN_INDENT must not be negative")
if not settings.AFFORDANCE_EXPORT_NAME.isidentifier():
    raise RuntimeError("AFFORDANCE_EXPORT_NAME must be a valid Python identifier")
