"""Tests for the gpg gateway: argument construction, staging lifecycle, error handling."""

from __future__ import annotations

import shlex
from pathlib import Path

import pytest

from gpgshim.app import GnuPGService, InvocationError, StagingError
from gpgshim.app.adapters import TemporaryDirectoryStaging
from gpgshim.protocol.status import ImportResult, SummaryCode
from fakes import RecordingExecutor

BASELINE = [
    "--quiet",
    "--status-fd",
    "1",
    "--lock-multiple",
    "--no-permission-warning",
    "--no-greeting",
    "--exit-on-status-write-error",
    "--batch",
    "--no-tty",
]


def _staged_files(directory: Path) -> list[Path]:
    return sorted(directory.iterdir())


class TestImportKey:
    """GnuPGService.import_key behaviour."""

    def test_import_reports_count_and_fingerprint(self, make_service, staging_dir: Path) -> None:
        service, executor = make_service(RecordingExecutor(["[GNUPG:] IMPORT_OK 3 ABCD1234"]))

        result = service.import_key(b"-----BEGIN PGP PUBLIC KEY BLOCK-----")

        assert result == ImportResult(imported=3, fingerprint="ABCD1234")
        assert _staged_files(staging_dir) == []

    def test_import_arguments(self, make_service, home_dir: Path) -> None:
        service, executor = make_service()

        service.import_key("key material")

        executable, arguments = executor.calls[0]
        assert executable == Path("/usr/bin/gpg")
        tokens = shlex.split(arguments)
        assert tokens[:2] == ["--homedir", str(home_dir)]
        assert tokens[2:11] == BASELINE
        assert tokens[11] == "--import"
        assert Path(tokens[12]).name.startswith("gpgshim_gpg_")
        assert tokens[13] == "2>/dev/null"
        assert len(tokens) == 14

    def test_import_stages_key_content(self, make_service) -> None:
        service, executor = make_service()

        service.import_key("armored key")

        (staged,) = executor.staged_contents[0].values()
        assert staged == b"armored key"

    def test_import_without_marker_means_nothing_imported(self, make_service) -> None:
        service, _ = make_service(RecordingExecutor(["[GNUPG:] NODATA 1"], exit_code=2))

        result = service.import_key(b"garbage")

        assert result.imported == 0
        assert result.fingerprint == ""

    def test_import_legacy_shape(self, make_service) -> None:
        service, _ = make_service(RecordingExecutor(["[GNUPG:] IMPORT_OK 1 FFFF0000"]))

        assert service.import_legacy(b"key") == {"imported": 1, "fingerprint": "FFFF0000"}

    def test_invocation_failure_propagates_after_cleanup(
        self, make_service, failing_executor: RecordingExecutor, staging_dir: Path
    ) -> None:
        service, _ = make_service(failing_executor)

        with pytest.raises(InvocationError, match="not found"):
            service.import_key(b"key")

        assert _staged_files(staging_dir) == []

    def test_invocation_failure_folded_when_not_strict(
        self, make_service, failing_executor: RecordingExecutor, staging_dir: Path
    ) -> None:
        service, _ = make_service(failing_executor, strict_invocation=False)

        result = service.import_key(b"key")

        assert result == ImportResult(imported=0)
        assert _staged_files(staging_dir) == []


class TestVerify:
    """GnuPGService.verify behaviour."""

    def test_verify_valid(self, make_service, staging_dir: Path) -> None:
        lines = ["[GNUPG:] VALIDSIG AAAA1111 2014-07-19 1405769272 0 4 0 1 10 00 AAAA1111"]
        service, _ = make_service(RecordingExecutor(lines))

        result = service.verify(b"message", b"signature")

        assert result is not None
        assert result.summary is SummaryCode.VALID
        assert result.fingerprint == "AAAA1111"
        assert result.timestamp == 1405769272
        assert result.status == tuple(lines)
        assert _staged_files(staging_dir) == []

    def test_verify_passes_signature_before_message(self, make_service) -> None:
        service, executor = make_service()

        service.verify(b"the message", b"the signature")

        tokens = shlex.split(executor.calls[0][1])
        verify_index = tokens.index("--verify")
        signature_path, message_path = tokens[verify_index + 1 : verify_index + 3]
        staged = executor.staged_contents[0]
        assert staged[signature_path] == b"the signature"
        assert staged[message_path] == b"the message"
        assert signature_path != message_path
        assert tokens[-1] == "2>/dev/null"

    def test_verify_without_verdict_returns_none(self, make_service) -> None:
        service, _ = make_service(RecordingExecutor(["[GNUPG:] NEWSIG", "[GNUPG:] NODATA 1"]))

        assert service.verify(b"m", b"s") is None
        assert service.verify_legacy(b"m", b"s") is False

    def test_verify_bad_signature_with_nonzero_exit(self, make_service) -> None:
        service, _ = make_service(
            RecordingExecutor(["[GNUPG:] BADSIG BBBB2222 Some Name <a@b.c>"], exit_code=1)
        )

        result = service.verify(b"m", b"s")

        assert result is not None
        assert result.summary is SummaryCode.BAD
        assert result.fingerprint == "BBBB2222"

    def test_verify_legacy_wraps_single_result(self, make_service) -> None:
        service, _ = make_service(RecordingExecutor(["[GNUPG:] ERRSIG CCCC3333 1 10 00 1405769272 9"]))

        legacy = service.verify_legacy(b"m", b"s")

        assert legacy == [
            {
                "fingerprint": "CCCC3333",
                "validity": 0,
                "timestamp": 1405769272,
                "status": ["[GNUPG:] ERRSIG CCCC3333 1 10 00 1405769272 9"],
                "summary": 128,
            }
        ]

    def test_invocation_failure_propagates_after_cleanup(
        self, make_service, failing_executor: RecordingExecutor, staging_dir: Path
    ) -> None:
        service, _ = make_service(failing_executor)

        with pytest.raises(InvocationError):
            service.verify(b"m", b"s")

        assert _staged_files(staging_dir) == []
        assert len(failing_executor.staged_contents[0]) == 2

    def test_invocation_failure_folded_when_not_strict(
        self, make_service, failing_executor: RecordingExecutor
    ) -> None:
        service, _ = make_service(failing_executor, strict_invocation=False)

        assert service.verify(b"m", b"s") is None

    def test_unexpected_executor_error_still_cleans_up(self, make_service, staging_dir: Path) -> None:
        service, _ = make_service(RecordingExecutor(error=RuntimeError("boom")))

        with pytest.raises(RuntimeError, match="boom"):
            service.verify(b"m", b"s")

        assert _staged_files(staging_dir) == []

    def test_staged_names_are_unique_per_call(self, make_service) -> None:
        service, executor = make_service()

        service.verify(b"m", b"s")
        service.verify(b"m", b"s")

        first = set(executor.staged_contents[0])
        second = set(executor.staged_contents[1])
        assert len(first) == 2
        assert first.isdisjoint(second)


class _FailingSecondWrite(TemporaryDirectoryStaging):
    """Staging adapter whose second write fails."""

    def __init__(self, directory: Path) -> None:
        super().__init__(directory)
        self.writes = 0

    def write(self, name: str, content: bytes) -> Path:
        self.writes += 1
        if self.writes == 2:
            raise PermissionError("disk says no")
        return super().write(name, content)


class _FailingDelete(TemporaryDirectoryStaging):
    def delete(self, path: Path) -> None:
        raise OSError("busy")


class TestStagingFailures:
    """Temporary resource failures are hard failures, with cleanup attempted."""

    def test_second_staging_failure_removes_first_file(self, staging_dir: Path, home_dir: Path) -> None:
        executor = RecordingExecutor()
        service = GnuPGService(
            executor,
            _FailingSecondWrite(staging_dir),
            gpg_binary=Path("/usr/bin/gpg"),
            home_dir=home_dir,
            platform="linux",
        )

        with pytest.raises(StagingError, match="disk says no"):
            service.verify(b"m", b"s")

        assert executor.calls == []
        assert _staged_files(staging_dir) == []

    def test_delete_failure_propagates(self, staging_dir: Path, home_dir: Path) -> None:
        service = GnuPGService(
            RecordingExecutor(["[GNUPG:] IMPORT_OK 1 AAAA"]),
            _FailingDelete(staging_dir),
            gpg_binary=Path("/usr/bin/gpg"),
            home_dir=home_dir,
            platform="linux",
        )

        with pytest.raises(StagingError, match="busy"):
            service.import_key(b"key")


class TestArgumentLine:
    """Deterministic, injection-safe command line construction."""

    def test_paths_with_shell_metacharacters_stay_single_arguments(self, tmp_path: Path) -> None:
        staging_dir = tmp_path / "it's a \"dir\" $(rm -rf x); `y`"
        home_dir = tmp_path / "home with spaces & 'quotes'"
        executor = RecordingExecutor()
        service = GnuPGService(
            executor,
            TemporaryDirectoryStaging(staging_dir),
            gpg_binary=Path("/usr/bin/gpg"),
            home_dir=home_dir,
            platform="linux",
        )

        service.verify(b"m", b"s")

        tokens = shlex.split(executor.calls[0][1])
        assert tokens[1] == str(home_dir)
        verify_index = tokens.index("--verify")
        for token in tokens[verify_index + 1 : verify_index + 3]:
            assert Path(token).parent == staging_dir.resolve()
        assert len(tokens) == 2 + len(BASELINE) + 3 + 1

    def test_windows_null_sink_and_quoting(self, staging_dir: Path) -> None:
        service = GnuPGService(
            RecordingExecutor(),
            TemporaryDirectoryStaging(staging_dir),
            gpg_binary=Path("gpg.exe"),
            home_dir=Path("C:/Users/me/gnupg"),
            platform="win32",
        )

        line = service.build_argument_line(["--import", '"C:/tmp/key"'])

        assert line.startswith('--homedir "C:/Users/me/gnupg" --quiet --status-fd 1')
        assert line.endswith('--import "C:/tmp/key" 2>nul')

    def test_windows_drive_root_home_keeps_argument_boundary(self, staging_dir: Path) -> None:
        service = GnuPGService(
            RecordingExecutor(),
            TemporaryDirectoryStaging(staging_dir),
            gpg_binary=Path("gpg.exe"),
            home_dir=Path("C:\\"),
            platform="win32",
        )

        assert service.baseline_arguments()[0] == '--homedir "C:\\\\"'

    def test_posix_null_sink(self, make_service) -> None:
        service, _ = make_service()

        assert service.build_argument_line([]).endswith(" 2>/dev/null")

    def test_baseline_order(self, make_service, home_dir: Path) -> None:
        service, _ = make_service()

        assert service.baseline_arguments() == [
            f"--homedir {shlex.quote(str(home_dir))}",
            "--quiet",
            "--status-fd 1",
            "--lock-multiple",
            "--no-permission-warning",
            "--no-greeting",
            "--exit-on-status-write-error",
            "--batch",
            "--no-tty",
        ]
