# accumulo_util/core/config.py

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    accumulo_home: Optional[str] = Field(default=None)
    accumulo_conf_dir: Optional[str] = Field(default=None)
    java_home: Optional[str] = Field(default=None)
    hadoop_home: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="",
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, value):
        # An exported but empty variable means "not set"
        if isinstance(value, str) and not value.strip():
            return None
        return value


def get_settings() -> Settings:
    """Read settings from the environment (and .env) as they are right now."""
    return Settings()


@dataclass(frozen=True)
class InstallPaths:
    """
    Locations inside an Accumulo installation.

    Attributes:
        home: Installation base directory
        conf: Configuration directory (ACCUMULO_CONF_DIR or home/conf)
    """
    home: Path
    conf: Path

    @property
    def bin(self) -> Path:
        return self.home / "bin"

    @property
    def lib(self) -> Path:
        return self.home / "lib"

    @property
    def native(self) -> Path:
        return self.lib / "native"

    @property
    def launcher(self) -> Path:
        return self.bin / "accumulo"

    @property
    def properties(self) -> Path:
        return self.conf / "accumulo.properties"

    @property
    def servers(self) -> Path:
        return self.conf / "tservers"


def _home_from_launcher() -> Optional[Path]:
    launcher = shutil.which("accumulo")
    if not launcher:
        return None
    # <home>/bin/accumulo
    return Path(launcher).resolve().parent.parent


def resolve_paths(settings: Settings, home: Optional[Path] = None) -> InstallPaths:
    """
    Work out the installation layout.

    The base directory is taken from the explicit ``home`` argument, then
    ACCUMULO_HOME, then the location of the ``accumulo`` launcher on PATH,
    and finally the current directory.

    Args:
        settings: Environment settings
        home: Base directory given on the command line, if any

    Returns:
        InstallPaths for the resolved installation
    """
    if home is not None:
        base = Path(home)
        source = "--home"
    elif settings.accumulo_home:
        base = Path(settings.accumulo_home)
        source = "ACCUMULO_HOME"
    else:
        base = _home_from_launcher()
        source = "accumulo launcher"
        if base is None:
            base = Path.cwd()
            source = "current directory"

    base = base.absolute()
    conf = Path(settings.accumulo_conf_dir).absolute() if settings.accumulo_conf_dir else base / "conf"
    logger.debug(f"Using installation at {base} (from {source}), conf at {conf}")
    return InstallPaths(home=base, conf=conf)
