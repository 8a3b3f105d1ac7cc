"""Unit tests for the deploykit CLI commands."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from deploykit.cli.main import app
from deploykit.docker.cleanup import CleanupReport
from deploykit.docker.deployer import DeployResult
from deploykit.docker.image_builder import BuildResult
from deploykit.docker.registry_manager import PushResult
from deploykit.exceptions import DockerError, RegistryPushError, VerificationFailedError
from deploykit.verification.models import AttemptOutcome, VerificationResult


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


def make_verification_result(success: bool) -> VerificationResult:
    return VerificationResult(
        success=success,
        container_name="app",
        attempts=1 if success else 2,
        max_attempts=2,
        delay_seconds=5,
        last_outcome=AttemptOutcome.match("1.0.0")
        if success
        else AttemptOutcome.process_not_running(),
    )


class TestVersion:
    def test_version_flag(self, runner):
        with patch("deploykit.cli.main.get_version", return_value="0.1.0"):
            result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "deploykit v0.1.0" in result.stdout


class TestBuildCommand:
    """Test build command."""

    def test_build(self, runner):
        with patch("deploykit.pipeline.build_image") as mock_build:
            mock_build.return_value = BuildResult(success=True, image="app:source")

            result = runner.invoke(
                app, ["build", "app", "--build-arg", "VERSION=1.0.0"]
            )

        assert result.exit_code == 0
        assert "app:source" in result.stdout
        assert mock_build.call_args.kwargs["build_args"] == {"VERSION": "1.0.0"}

    def test_build_failure(self, runner):
        with patch("deploykit.pipeline.build_image") as mock_build:
            mock_build.side_effect = DockerError("build failed")

            result = runner.invoke(app, ["build", "app"])

        assert result.exit_code == 1
        assert "build failed" in result.stdout

    def test_malformed_build_arg(self, runner):
        with patch("deploykit.pipeline.build_image") as mock_build:
            result = runner.invoke(app, ["build", "app", "--build-arg", "VERSION"])

        assert result.exit_code == 2
        mock_build.assert_not_called()


class TestDeployCommand:
    """Test deploy command."""

    def test_deploy(self, runner):
        with patch("deploykit.pipeline.deploy_container") as mock_deploy:
            mock_deploy.return_value = DeployResult(
                success=True,
                container_name="app",
                image="app:source",
                container_id="abc123",
            )

            result = runner.invoke(
                app, ["deploy", "app", "app", "8080", "--restart", "unless-stopped"]
            )

        assert result.exit_code == 0
        assert "abc123" in result.stdout
        assert mock_deploy.call_args.kwargs["restart_policy"] == "unless-stopped"

    def test_deploy_failure(self, runner):
        with patch("deploykit.pipeline.deploy_container") as mock_deploy:
            mock_deploy.side_effect = DockerError("port is already allocated")

            result = runner.invoke(app, ["deploy", "app", "app", "8080"])

        assert result.exit_code == 1


class TestVerifyCommand:
    """Test verify command."""

    def test_verify_success(self, runner):
        with patch("deploykit.pipeline.verify_container") as mock_verify:
            mock_verify.return_value = make_verification_result(True)

            result = runner.invoke(
                app, ["verify", "app", "1.0.0", "8080", "/api/version"]
            )

        assert result.exit_code == 0
        assert "running version 1.0.0" in result.stdout

    def test_verify_options(self, runner):
        with patch("deploykit.pipeline.verify_container") as mock_verify:
            mock_verify.return_value = make_verification_result(True)

            runner.invoke(
                app,
                [
                    "verify",
                    "app",
                    "1.0.0",
                    "8080",
                    "/api/version",
                    "--max-attempts",
                    "3",
                    "--delay",
                    "1",
                    "--fail-fast-on-mismatch",
                ],
            )

        kwargs = mock_verify.call_args.kwargs
        assert kwargs["max_attempts"] == 3
        assert kwargs["delay_seconds"] == 1
        assert kwargs["fail_fast_on_mismatch"] is True
        assert kwargs["host"] == "localhost"

    def test_verify_failure_exits_nonzero(self, runner):
        """A failed verification reports the reason and exits with 1."""
        with patch("deploykit.pipeline.verify_container") as mock_verify:
            mock_verify.side_effect = VerificationFailedError(
                make_verification_result(False)
            )

            result = runner.invoke(app, ["verify", "app", "1.0.0", "8080", "/health"])

        assert result.exit_code == 1
        assert "did not start successfully" in result.stdout


class TestPushCommand:
    """Test push command."""

    def test_push_with_password_stdin(self, runner):
        with patch("deploykit.pipeline.push_to_registry") as mock_push:
            mock_push.return_value = PushResult(
                success=True,
                images=["registry.example.com/app:latest"],
            )

            result = runner.invoke(
                app,
                [
                    "push",
                    "app",
                    "registry.example.com",
                    "1.0.0",
                    "-u",
                    "ci-bot",
                    "--password-stdin",
                ],
                input="token\n",
            )

        assert result.exit_code == 0
        credentials = mock_push.call_args.kwargs["credentials"]
        assert credentials.username == "ci-bot"
        assert credentials.password == "token"

    def test_password_stdin_requires_username(self, runner):
        with patch("deploykit.pipeline.push_to_registry") as mock_push:
            result = runner.invoke(
                app,
                ["push", "app", "registry.example.com", "1.0.0", "--password-stdin"],
                input="token\n",
            )

        assert result.exit_code == 1
        mock_push.assert_not_called()

    def test_push_failure(self, runner):
        with patch("deploykit.pipeline.push_to_registry") as mock_push:
            mock_push.side_effect = RegistryPushError("denied")

            result = runner.invoke(app, ["push", "app", "registry.example.com", "1.0"])

        assert result.exit_code == 1
        assert "denied" in result.stdout


class TestCleanupCommand:
    """Test cleanup command."""

    def test_cleanup_reports_failures_without_failing(self, runner):
        report = CleanupReport(
            removed=["app:old"], failures=[("dangling images", "daemon error")]
        )
        with patch("deploykit.pipeline.cleanup", return_value=report) as mock_cleanup:
            result = runner.invoke(
                app,
                [
                    "cleanup",
                    "app",
                    "app",
                    "--registry",
                    "registry.example.com",
                    "--keep-version",
                    "1.0.0",
                ],
            )

        assert result.exit_code == 0
        assert "app:old" in result.stdout
        assert "Skipped" in result.stdout
        assert mock_cleanup.call_args.kwargs == {
            "registry": "registry.example.com",
            "keep_version": "1.0.0",
        }
