"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass

from gpgshim.app import GnuPGService
from gpgshim.app.adapters import ShellExecutor, TemporaryDirectoryStaging
from gpgshim.app.ports import ExecutorPort, KeyringPort, StagingPort
from gpgshim.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    executor: ExecutorPort
    staging: StagingPort
    keyring: KeyringPort


def bootstrap_application(
    settings: Settings | None = None,
    *,
    executor: ExecutorPort | None = None,
) -> ApplicationContainer:
    """Create the application container with default adapters.

    Args:
        settings: Configuration to use (defaults to the global settings)
        executor: Replacement process executor (tests inject a fake here)
    """
    active_settings = settings or get_settings()

    executor_port = executor or ShellExecutor()
    staging_port = TemporaryDirectoryStaging(active_settings.get_tmp_dir())
    keyring = GnuPGService(
        executor_port,
        staging_port,
        gpg_binary=active_settings.get_gpg_binary(),
        home_dir=active_settings.get_home_dir(),
        strict_invocation=active_settings.strict_invocation,
    )

    return ApplicationContainer(
        settings=active_settings,
        executor=executor_port,
        staging=staging_port,
        keyring=keyring,
    )
