"""
Unit tests for the command line.
"""

import argparse
import io
import json

import pytest

from zksubmit.cli import (
    EXIT_FATAL,
    EXIT_OK,
    EXIT_PARTIAL,
    build_parser,
    exit_code_for,
    main,
    resolve_run_arguments,
)
from zksubmit.config import Settings, get_settings
from zksubmit.exceptions import ConfigurationError, ProverFailure
from zksubmit.pipeline.runner import RunReport
from zksubmit.relayer.models import SubmissionOutcome, SubmissionResult


@pytest.fixture
def settings(monkeypatch) -> Settings:
    monkeypatch.delenv("RELAYER_API_KEY", raising=False)
    return Settings()


@pytest.fixture
def fresh_settings(monkeypatch, tmp_path):
    """Point settings at an empty working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RELAYER_API_KEY", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


def _args(**kwargs) -> argparse.Namespace:
    defaults = {"api_key": None, "iterations": None, "audit_log": None}
    defaults.update(kwargs)
    return argparse.Namespace(**defaults)


class TestResolveRunArguments:
    def test_from_options(self, settings):
        assert resolve_run_arguments(_args(api_key="k", iterations=3), settings) == ("k", 3)

    def test_api_key_from_settings(self, monkeypatch):
        monkeypatch.setenv("RELAYER_API_KEY", "env-key")
        assert resolve_run_arguments(_args(iterations=1), Settings()) == ("env-key", 1)

    def test_option_overrides_configured_key(self, monkeypatch):
        monkeypatch.setenv("RELAYER_API_KEY", "env-key")
        assert resolve_run_arguments(_args(api_key="cli-key", iterations=1), Settings()) == ("cli-key", 1)

    def test_missing_values_without_terminal(self, settings, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO())
        with pytest.raises(ConfigurationError, match="Missing API key or submission count"):
            resolve_run_arguments(_args(), settings)

    def test_prompts_on_terminal(self, settings, monkeypatch):
        monkeypatch.setattr("sys.stdin", _Terminal())
        monkeypatch.setattr("getpass.getpass", lambda prompt: "typed-key")
        monkeypatch.setattr("builtins.input", lambda prompt: " 7 ")

        assert resolve_run_arguments(_args(), settings) == ("typed-key", 7)

    def test_non_numeric_count(self, settings, monkeypatch):
        monkeypatch.setattr("sys.stdin", _Terminal())
        monkeypatch.setattr("builtins.input", lambda prompt: "many")

        with pytest.raises(ConfigurationError, match="Not a number"):
            resolve_run_arguments(_args(api_key="k"), settings)

    def test_negative_count(self, settings):
        with pytest.raises(ConfigurationError):
            resolve_run_arguments(_args(api_key="k", iterations=-2), settings)


class TestExitCodes:
    def test_all_accepted(self):
        report = RunReport(
            requested=1,
            results=[SubmissionResult(iteration=1, outcome=SubmissionOutcome.ACCEPTED)],
        )
        assert exit_code_for(report) == EXIT_OK

    def test_partial(self):
        report = RunReport(
            requested=2,
            results=[
                SubmissionResult(iteration=1, outcome=SubmissionOutcome.ACCEPTED),
                SubmissionResult(iteration=2, outcome=SubmissionOutcome.EXHAUSTED),
            ],
        )
        assert exit_code_for(report) == EXIT_PARTIAL


class TestMain:
    def test_parser_requires_command(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_run_without_verification_key_is_fatal(self, fresh_settings, capsys):
        code = main(["run", "-n", "1", "--api-key", "k"])

        assert code == EXIT_FATAL
        assert "Verification key not found" in capsys.readouterr().out

    def test_zero_iterations_exits_cleanly(self, fresh_settings, tmp_path, sample_verification_key):
        keys = tmp_path / "keys"
        keys.mkdir()
        (keys / "verification_key.json").write_text(json.dumps(sample_verification_key))

        assert main(["run", "-n", "0", "--api-key", "k"]) == EXIT_OK

    def test_aborted_run_reports_progress(self, fresh_settings, monkeypatch, capsys):
        async def aborted_run(settings, api_key, iterations):
            error = ProverFailure("snarkjs wtns failed")
            error.report = RunReport(
                requested=iterations,
                results=[SubmissionResult(iteration=1, outcome=SubmissionOutcome.ACCEPTED)],
            )
            raise error

        monkeypatch.setattr("zksubmit.cli.run_submissions", aborted_run)

        code = main(["run", "-n", "3", "--api-key", "k"])

        out = capsys.readouterr().out
        assert code == EXIT_FATAL
        assert "Completed 1/3 iterations before the run was aborted" in out
        assert "snarkjs wtns failed" in out
