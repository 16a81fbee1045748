"""Configuration management with Pydantic and XDG base directory support."""

import os
import shutil
import sys
from pathlib import Path

from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

from gpgshim.utils.paths import ensure_dir

_GPG_CANDIDATES = ("gpg", "gpg2")


def get_xdg_data_home() -> Path:
    """Get XDG_DATA_HOME directory, defaulting to ~/.local/share."""
    xdg_data = os.getenv("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


class Settings(BaseSettings):
    """gpgshim configuration settings.

    Precedence: CLI flag > environment variable > config file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="GPGSHIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Data directory
    data_dir: Path | None = Field(
        default=None,
        description="Override data directory (defaults to XDG_DATA_HOME/gpgshim)",
    )

    # gpg invocation
    gpg_binary: Path | None = Field(
        default=None,
        description="Path to the gpg executable (defaults to gpg or gpg2 on PATH)",
    )

    home_dir: Path | None = Field(
        default=None,
        description="Isolated gpg home directory (defaults to <data_dir>/gnupg)",
    )

    tmp_dir: Path | None = Field(
        default=None,
        description="Scratch directory for staged key, message and signature files",
    )

    strict_invocation: bool = Field(
        default=True,
        description="Raise when gpg cannot be run instead of reporting an empty result",
    )

    _resolved_data_dir: Path | None = PrivateAttr(default=None)
    _data_dir_warning_emitted: bool = PrivateAttr(default=False)

    def get_data_dir(self) -> Path:
        """Get the data directory, creating if necessary."""
        if self._resolved_data_dir is not None:
            return self._resolved_data_dir

        if self.data_dir:
            data_dir = ensure_dir(self.data_dir)
            self._resolved_data_dir = data_dir
            return data_dir

        primary_dir = get_xdg_data_home() / "gpgshim"
        try:
            ensure_dir(primary_dir)
            self._resolved_data_dir = primary_dir
            return primary_dir
        except PermissionError as exc:
            fallback = ensure_dir(Path.cwd() / ".gpgshim-data")
            self._resolved_data_dir = fallback
            if not self._data_dir_warning_emitted:
                print(
                    f"Warning: cannot create data directory at {primary_dir} ({exc}). "
                    f"Using local '{fallback}' instead. Pass --data-dir to override.",
                    file=sys.stderr,
                )
                self._data_dir_warning_emitted = True
            return fallback

    def get_gpg_binary(self) -> Path:
        """Return the configured gpg executable, searching PATH when unset.

        Falls back to the bare name ``gpg`` so a missing binary surfaces as an
        invocation failure rather than a configuration error.
        """
        if self.gpg_binary is not None:
            return self.gpg_binary.expanduser()

        for candidate in _GPG_CANDIDATES:
            found = shutil.which(candidate)
            if found:
                return Path(found)

        return Path(_GPG_CANDIDATES[0])

    def get_home_dir(self) -> Path:
        """Get the gpg home directory, creating it owner-only if necessary."""
        home_dir = (
            self.home_dir.expanduser()
            if self.home_dir is not None
            else self.get_data_dir() / "gnupg"
        )
        return ensure_dir(home_dir, 0o700)

    def get_tmp_dir(self) -> Path:
        """Get the scratch directory used for staged input files.

        A missing directory is created owner-only. A configured directory that
        already exists keeps its permissions (a warning is logged if they are
        wider than 0700).
        """
        tmp_dir = (
            self.tmp_dir.expanduser()
            if self.tmp_dir is not None
            else self.get_data_dir() / "tmp"
        )
        return ensure_dir(tmp_dir, 0o700)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
