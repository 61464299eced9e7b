"""Configuration settings for bttgen."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    """bttgen settings (environment, then CLI overrides)."""
    output_dir: str = "test/trees"
    solc_version: Optional[str] = None
    auto_install_solc: bool = False
    verbose: bool = False


def load_settings() -> Settings:
    """Read settings from the environment, loading a .env file if present."""
    load_dotenv()

    return Settings(
        output_dir=os.getenv("BTTGEN_OUTPUT_DIR", "test/trees"),
        solc_version=os.getenv("BTTGEN_SOLC_VERSION") or None,
        auto_install_solc=_env_flag("BTTGEN_AUTO_INSTALL_SOLC"),
        verbose=_env_flag("BTTGEN_VERBOSE"),
    )
