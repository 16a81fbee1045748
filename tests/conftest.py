"""Pytest configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path

import pytest

from gpgshim.app import GnuPGService
from gpgshim.app.adapters import TemporaryDirectoryStaging
from gpgshim.app.ports import ExecutionError
from gpgshim.config import Settings
from fakes import RecordingExecutor


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "staging"
    directory.mkdir()
    return directory


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "gnupg"
    directory.mkdir()
    return directory


@pytest.fixture
def make_service(staging_dir: Path, home_dir: Path):
    """Factory building a POSIX-flavoured GnuPGService around a RecordingExecutor."""

    def factory(
        executor: RecordingExecutor | None = None,
        *,
        strict_invocation: bool = True,
    ) -> tuple[GnuPGService, RecordingExecutor]:
        recorder = executor or RecordingExecutor()
        service = GnuPGService(
            recorder,
            TemporaryDirectoryStaging(staging_dir),
            gpg_binary=Path("/usr/bin/gpg"),
            home_dir=home_dir,
            strict_invocation=strict_invocation,
            platform="linux",
        )
        return service, recorder

    return factory


@pytest.fixture
def failing_executor() -> RecordingExecutor:
    return RecordingExecutor(error=ExecutionError("/usr/bin/gpg not found"))


@pytest.fixture
def override_settings(tmp_path: Path) -> Generator[Settings, None, None]:
    """Provide isolated gpgshim settings scoped to tests."""

    import gpgshim.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    data_dir = tmp_path / "appdata"
    data_dir.mkdir(parents=True, exist_ok=True)

    settings = config_module.Settings(
        data_dir=data_dir,
        gpg_binary=Path("/usr/bin/gpg"),
    )

    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings
