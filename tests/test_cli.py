"""Tests for the command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from album_mirror.cli.main import cli
from album_mirror.config import AuthCoverPolicy
from album_mirror.core.artwork import ArtworkError
from album_mirror.core.http import FetchErrorKind
from album_mirror.core.pipeline import RunReport, SkippedAlbum
from album_mirror.exceptions import (
    ArtworkFetchFailure,
    ConfigurationError,
    CredentialResolutionError,
)
from album_mirror.models import SyncKind, SyncResult


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove album mirror variables from the environment."""
    for name in [
        "ALBUM_MIRROR_HTTP_TIMEOUT",
        "ALBUM_MIRROR_AUTH_COVER_POLICY",
        "ALBUM_MIRROR_CREDENTIALS_FILE",
    ]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


class TestCli:
    """Test option handling and the end-of-run summary."""

    def test_all_up_to_date(self, runner, tmp_path):
        """Test an empty report prints the up-to-date message."""
        with patch("album_mirror.cli.main.run_mirror", return_value=RunReport()):
            result = runner.invoke(cli, ["--source", str(tmp_path)])

        assert result.exit_code == 0
        assert "All up-to-date" in result.output

    def test_updated_albums_listed(self, runner, tmp_path):
        """Test updated albums are listed with their copied files."""
        report = RunReport(
            results=[
                SyncResult(
                    target_path=Path("/lib/Artist/Album"),
                    kind=SyncKind.UPDATED,
                    copied_files=["03.flac"],
                    failed_files=["04.flac"],
                )
            ],
            skipped=[SkippedAlbum(path=Path("/src/Bad"), reason="no audio files")],
            artwork_errors=[
                (
                    Path("/src/Album"),
                    ArtworkError("tidal", FetchErrorKind.HTTP_STATUS, "HTTP 404"),
                )
            ],
        )
        with patch("album_mirror.cli.main.run_mirror", return_value=report):
            result = runner.invoke(cli, ["--source", str(tmp_path)])

        assert result.exit_code == 0
        assert "Updated following albums:" in result.output
        assert "03.flac" in result.output
        assert "failed to copy" in result.output
        assert "[tidal]" in result.output
        assert "no audio files" in result.output

    def test_options_reach_config(self, runner, tmp_path):
        """Test command-line options become configuration values."""
        target = tmp_path / "target"
        with patch(
            "album_mirror.cli.main.run_mirror", return_value=RunReport()
        ) as mock_run:
            result = runner.invoke(
                cli,
                [
                    "-s",
                    str(tmp_path),
                    "-t",
                    str(target),
                    "-c",
                    "--tidal-auth",
                    "token",
                    "--strict-auth-covers",
                    "--timeout",
                    "5",
                ],
            )

        assert result.exit_code == 0
        config = mock_run.call_args.args[0]
        assert config.source_directory == tmp_path
        assert config.target_directory == target
        assert config.fetch_covers is True
        assert config.access_token == "token"
        assert config.auth_cover_policy == AuthCoverPolicy.STRICT
        assert config.http_timeout == 5.0

    def test_missing_source_aborts(self, runner, tmp_path):
        """Test a configuration error exits non-zero without a report."""
        result = runner.invoke(cli, ["--source", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "Configuration error" in result.output
        assert "All up-to-date" not in result.output

    def test_source_is_required(self, runner):
        """Test the source option is mandatory."""
        result = runner.invoke(cli, [])

        assert result.exit_code != 0

    def test_credential_failure_aborts(self, runner, tmp_path):
        """Test a failed token refresh aborts the run."""
        with patch(
            "album_mirror.cli.main.run_mirror",
            side_effect=CredentialResolutionError("refresh failed"),
        ):
            result = runner.invoke(cli, ["--source", str(tmp_path)])

        assert result.exit_code == 1
        assert "refresh failed" in result.output

    def test_invalid_timeout(self, runner, tmp_path):
        """Test a non-positive timeout is rejected."""
        with patch("album_mirror.cli.main.run_mirror") as mock_run:
            result = runner.invoke(
                cli, ["--source", str(tmp_path), "--timeout", "0"]
            )

        assert result.exit_code == 1
        mock_run.assert_not_called()

    def test_configuration_error_from_run(self, runner, tmp_path):
        """Test configuration errors raised during the run are reported."""
        with patch(
            "album_mirror.cli.main.run_mirror",
            side_effect=ConfigurationError("bad creds"),
        ):
            result = runner.invoke(cli, ["--source", str(tmp_path)])

        assert result.exit_code == 1
        assert "bad creds" in result.output

    def test_strict_auth_covers_reaches_run(self, runner, tmp_path):
        """Test the strict flag selects the strict policy without errors."""
        with patch(
            "album_mirror.cli.main.run_mirror", return_value=RunReport()
        ) as mock_run:
            result = runner.invoke(
                cli, ["-s", str(tmp_path), "-c", "--strict-auth-covers"]
            )

        assert result.exit_code == 0, result.output
        assert "Configuration error" not in result.output
        config = mock_run.call_args.args[0]
        assert config.auth_cover_policy == AuthCoverPolicy.STRICT

    def test_default_policy_is_log(self, runner, tmp_path):
        """Test runs without the flag keep the log policy."""
        with patch(
            "album_mirror.cli.main.run_mirror", return_value=RunReport()
        ) as mock_run:
            runner.invoke(cli, ["-s", str(tmp_path)])

        assert mock_run.call_args.args[0].auth_cover_policy == AuthCoverPolicy.LOG

    def test_strict_cover_failure_aborts(self, runner, tmp_path):
        """Test a strict-policy artwork failure aborts without a report."""

        def fail_if_strict(config, progress=None):
            assert config.auth_cover_policy == AuthCoverPolicy.STRICT
            raise ArtworkFetchFailure("Failed to fetch Tidal cover", kind="no_cover")

        with patch("album_mirror.cli.main.run_mirror", side_effect=fail_if_strict):
            result = runner.invoke(
                cli, ["-s", str(tmp_path), "-c", "--strict-auth-covers"]
            )

        assert result.exit_code == 1
        assert "Run aborted" in result.output
        assert "Failed to fetch Tidal cover" in result.output
        assert "All up-to-date" not in result.output
