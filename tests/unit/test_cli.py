"""Tests for the QuickSSM commands and the CLI entry point."""

import sys

import pytest
from moto import mock_aws

from quickssm.__main__ import QuickSSM
from quickssm.cli.main import QuickSSMCLI, main
from quickssm.core.session import (
    LauncherNotFoundError,
    SessionController,
    SessionResult,
    SessionState,
)
from quickssm.diagnostics.models import CheckName, DiagnosticReport
from quickssm.providers.exceptions import (
    InstanceNotFoundError,
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)
from tests.unit.fakes.fake_process import FakeInterruptSource, FakePopenFactory, FakeProcess


class SessionFactory:
    """Builds controllers with a fake, already exited process."""

    def __init__(self, returncode: int = 0, launcher_found: bool = True) -> None:
        self.returncode = returncode
        self.launcher_found = launcher_found
        self.controllers: list[SessionController] = []
        self.popen = FakePopenFactory()

    def __call__(self, **kwargs) -> SessionController:
        process = FakeProcess(returncode=self.returncode)
        process.exit()
        self.popen.process = process
        controller = SessionController(
            popen_factory=self.popen,
            interrupt_source=FakeInterruptSource(),
            which=lambda name: f"/usr/bin/{name}" if self.launcher_found else None,
            **kwargs,
        )
        self.controllers.append(controller)
        return controller


@pytest.fixture
def mocked_aws(aws_credentials):
    """Mock all AWS interactions."""
    with mock_aws():
        yield


@pytest.fixture
def instances(mocked_aws):
    """Launch three instances, two of them sharing a name."""
    import boto3

    ec2 = boto3.client("ec2", region_name="us-east-1")
    image_id = ec2.describe_images()["Images"][0]["ImageId"]
    ids = {}
    for name in ["web", "web", "api"]:
        response = ec2.run_instances(
            ImageId=image_id,
            InstanceType="t3.micro",
            MinCount=1,
            MaxCount=1,
            TagSpecifications=[
                {"ResourceType": "instance", "Tags": [{"Key": "Name", "Value": name}]}
            ],
        )
        ids.setdefault(name, []).append(response["Instances"][0]["InstanceId"])
    ids["web"].sort()
    return ids


def _quickssm(console, answer: str = "", **kwargs) -> QuickSSM:
    return QuickSSM(console=console, input_func=lambda prompt: answer, **kwargs)


class TestList:
    def test_lists_instances_with_display_names(self, instances, console, console_output):
        _quickssm(console).list()

        output = console_output.getvalue()
        assert "Account: 123456789012" in output
        assert f"1. api     {instances['api'][0]}" in output
        assert f"2. web     {instances['web'][0]}" in output
        assert f"3. web (2) {instances['web'][1]}" in output

    def test_private_mode_hides_account(self, instances, console, console_output):
        _quickssm(console).list(private_mode=True)

        assert "Account" not in console_output.getvalue()

    def test_private_mode_from_config(self, instances, console, console_output, write_config):
        write_config({"defaults": {"private_mode": True}})

        _quickssm(console).list()

        assert "Account" not in console_output.getvalue()

    def test_empty_account(self, mocked_aws, console, console_output):
        _quickssm(console).list()

        assert "No instances found" in console_output.getvalue()


class TestConnect:
    def test_selected_instance_gets_a_session(self, instances, console, console_output):
        sessions = SessionFactory()

        result = _quickssm(console, "3", session_controller_factory=sessions).connect(
            region="us-east-1"
        )

        assert isinstance(result, SessionResult)
        assert result.state is SessionState.COMPLETED
        assert sessions.popen.commands == [
            [
                "aws",
                "ssm",
                "start-session",
                "--target",
                instances["web"][1],
                "--region",
                "us-east-1",
            ]
        ]
        output = console_output.getvalue()
        assert f"Selected instance: web (2) {instances['web'][1]}" in output
        assert "Connecting to instance. This may take a few moments:" in output

    @pytest.mark.parametrize("answer", ["", "x", "9"])
    def test_rejected_selection_starts_nothing(self, instances, console, answer):
        sessions = SessionFactory()

        result = _quickssm(console, answer, session_controller_factory=sessions).connect()

        assert result is None
        assert sessions.popen.commands == []

    def test_instance_flag_skips_picker(self, instances, console, console_output):
        sessions = SessionFactory()
        target = instances["api"][0]

        _quickssm(console, session_controller_factory=sessions).connect(instance=target)

        assert sessions.popen.commands[0][4] == target
        assert "1. api" not in console_output.getvalue()

    def test_missing_launcher_fails_before_listing(self, instances, console, console_output):
        sessions = SessionFactory(launcher_found=False)

        with pytest.raises(LauncherNotFoundError):
            _quickssm(console, "1", session_controller_factory=sessions).connect()

        assert console_output.getvalue() == ""
        assert sessions.popen.commands == []

    def test_profile_and_launcher_come_from_config(self, instances, console, write_config):
        write_config({"defaults": {"launcher": "aws2"}})
        sessions = SessionFactory()

        _quickssm(console, "1", session_controller_factory=sessions).connect()

        assert sessions.popen.commands[0][0] == "aws2"

    def test_check_flag_runs_diagnostics(self, instances, console):
        sessions = SessionFactory()

        result = _quickssm(console, "1", session_controller_factory=sessions).connect(check=True)

        assert isinstance(result, DiagnosticReport)
        assert sessions.popen.commands == []


class TestCheck:
    def test_report_for_selected_instance(self, instances, console, console_output):
        report = _quickssm(console, "1").check()

        assert report.instance_id == instances["api"][0]
        assert [r.check for r in report.results] == list(CheckName)
        output = console_output.getvalue()
        assert "<> <> DIAGNOSTIC MODE <> <>" in output
        assert f"DIAGNOSTIC CHECKS FOR INSTANCE: {instances['api'][0]}" in output
        assert "DIAGNOSTIC SUMMARY" in output
        assert "No IAM instance profile attached to the instance" in output

    def test_unknown_instance_raises(self, mocked_aws, console):
        with pytest.raises(InstanceNotFoundError):
            _quickssm(console).check(instance="i-1234567890abcdef0")

    def test_sequential_checks_from_config(self, instances, console, write_config):
        write_config({"defaults": {"parallel_checks": False}})

        report = _quickssm(console).check(instance=instances["web"][0])

        assert len(report.results) == 3


class Raising:
    """Fire target whose only command raises the configured error."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def boom(self) -> None:
        raise self.error


@pytest.fixture
def run_main(monkeypatch):
    """Run main() with a Fire target raising ``error`` and return the exit code."""
    monkeypatch.setattr(sys, "argv", ["quickssm", "boom"])

    def _run(error: Exception) -> int:
        with pytest.raises(SystemExit) as exc_info:
            main(cli_factory=lambda: Raising(error))
        return exc_info.value.code

    return _run


class TestMain:
    @pytest.mark.parametrize(
        "error, code, message",
        [
            (ProviderCredentialsError("no creds"), 1, "AWS credentials not found"),
            (InstanceNotFoundError("i-0abc"), 1, "Error: Instance i-0abc not found"),
            (
                ProviderAPIError("denied", error_code="UnauthorizedOperation"),
                1,
                "Insufficient IAM permissions",
            ),
            (
                ProviderAPIError("slow down", error_code="RequestLimitExceeded"),
                1,
                "rate limit exceeded",
            ),
            (ProviderAPIError("odd", error_code="Weird"), 1, "AWS API error: odd"),
            (ProviderConnectionError("unreachable"), 1, "Could not reach AWS: unreachable"),
            (LauncherNotFoundError("aws"), 1, "session-manager-plugin"),
            (ValueError("region must be a non-empty string"), 2, "Configuration error"),
            (RuntimeError("broken"), 1, "Unexpected error: broken"),
        ],
    )
    def test_errors_map_to_exit_codes(self, run_main, capsys, error, code, message):
        assert run_main(error) == code
        assert message in capsys.readouterr().err

    def test_ctrl_c_exits_quietly(self, run_main, capsys):
        assert run_main(KeyboardInterrupt()) == 130

        err = capsys.readouterr().err
        assert "Operation cancelled by user" in err
        assert "Traceback" not in err

    def test_ctrl_c_at_picker_prompt_exits_quietly(
        self, instances, console, capsys, monkeypatch
    ):
        def interrupt(prompt: str) -> str:
            raise KeyboardInterrupt

        monkeypatch.setattr(sys, "argv", ["quickssm", "check"])

        with pytest.raises(SystemExit) as exc_info:
            main(cli_factory=lambda: QuickSSMCLI(console=console, input_func=interrupt))

        assert exc_info.value.code == 130
        assert "Operation cancelled by user" in capsys.readouterr().err

    def test_debug_mode_reraises(self, run_main, monkeypatch):
        monkeypatch.setenv("QUICKSSM_DEBUG", "1")

        with pytest.raises(ProviderConnectionError):
            main(cli_factory=lambda: Raising(ProviderConnectionError("unreachable")))

    def test_failed_session_exits_with_failure(self, instances, console, capsys):
        cli = QuickSSMCLI(
            console=console,
            input_func=lambda prompt: "1",
            session_controller_factory=SessionFactory(returncode=255),
        )

        with pytest.raises(SystemExit) as exc_info:
            cli.connect()

        assert exc_info.value.code == 1
        assert "SSM session ended with error: exit status 255" in capsys.readouterr().err

    def test_successful_session_returns_normally(self, instances, console):
        cli = QuickSSMCLI(
            console=console,
            input_func=lambda prompt: "1",
            session_controller_factory=SessionFactory(),
        )

        assert cli.connect() is None
