"""Tests for the runner adapter and workflow-command logging."""

import io
import logging
import os

import pytest

from common import actions
from common.logging_utils import ActionsFormatter, configure_logging, extra_context, safe_url
from errors import InputError


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("GITHUB_OUTPUT", "GITHUB_PATH", "GITHUB_ACTIONS", "RUNNER_DEBUG",
                 "SETUP_SHIROA_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestInputs:
    """Reading INPUT_* variables."""

    def test_get_input_trims(self, clean_env):
        clean_env.setenv("INPUT_SHIROA-VERSION", "  ^0.3.0 ")
        assert actions.get_input("shiroa-version") == "^0.3.0"

    def test_missing_input_is_empty(self, clean_env):
        clean_env.delenv("INPUT_GITHUB-TOKEN", raising=False)
        assert actions.get_input("github-token") == ""

    def test_required_input(self, clean_env):
        clean_env.delenv("INPUT_GITHUB-TOKEN", raising=False)
        with pytest.raises(InputError):
            actions.get_input("github-token", required=True)

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("True", True), ("TRUE", True),
        ("false", False), ("False", False), ("FALSE", False), ("", False),
    ])
    def test_boolean_input(self, clean_env, raw, expected):
        clean_env.setenv("INPUT_ALLOW-PRERELEASES", raw)
        assert actions.get_boolean_input("allow-prereleases") is expected

    def test_boolean_input_rejects_other_spellings(self, clean_env):
        clean_env.setenv("INPUT_ALLOW-PRERELEASES", "yes")
        with pytest.raises(InputError):
            actions.get_boolean_input("allow-prereleases")


class TestOutputs:
    """Writing GITHUB_OUTPUT and GITHUB_PATH."""

    def test_set_output_file(self, clean_env, tmp_path):
        output = tmp_path / "output"
        output.write_text("")
        clean_env.setenv("GITHUB_OUTPUT", str(output))

        actions.set_output("shiroa-version", "0.3.0")

        lines = output.read_text().splitlines()
        assert lines[0].startswith("shiroa-version<<ghadelimiter_")
        assert lines[1] == "0.3.0"
        assert lines[2] == lines[0].split("<<", 1)[1]

    def test_set_output_fallback(self, clean_env, capsys):
        actions.set_output("cache-hit", "/opt/cache")
        assert "::set-output name=cache-hit::/opt/cache" in capsys.readouterr().out

    def test_add_path(self, clean_env, tmp_path):
        path_file = tmp_path / "path"
        path_file.write_text("")
        clean_env.setenv("GITHUB_PATH", str(path_file))
        clean_env.setenv("PATH", "/usr/bin")

        actions.add_path("/opt/shiroa")

        assert path_file.read_text().strip() == "/opt/shiroa"
        assert os.environ["PATH"].split(os.pathsep)[0] == "/opt/shiroa"

    def test_missing_command_file(self, clean_env, tmp_path):
        clean_env.setenv("GITHUB_OUTPUT", str(tmp_path / "missing"))
        with pytest.raises(InputError):
            actions.set_output("x", "y")


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("restore_root_logger")
class TestLogging:
    """Formatting and structured helpers."""

    def _record(self, level, msg):
        return logging.LogRecord("t", level, __file__, 1, msg, None, None)

    def test_actions_formatter(self):
        formatter = ActionsFormatter()
        assert formatter.format(self._record(logging.DEBUG, "trace")) == "::debug::trace"
        assert formatter.format(self._record(logging.INFO, "hello")) == "hello"
        assert formatter.format(self._record(logging.WARNING, "careful")) == "::warning::careful"
        assert formatter.format(self._record(logging.ERROR, "50% done\nnext")) == "::error::50%25 done%0Anext"

    def test_configure_logging_in_actions(self, clean_env):
        clean_env.setenv("GITHUB_ACTIONS", "true")
        clean_env.setenv("RUNNER_DEBUG", "1")
        stream = io.StringIO()

        configure_logging(stream)
        logging.getLogger("probe").debug("visible")

        assert "::debug::visible" in stream.getvalue()
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_plain(self, clean_env):
        clean_env.setenv("SETUP_SHIROA_LOG_LEVEL", "warning")
        stream = io.StringIO()

        configure_logging(stream)
        logging.getLogger("probe").info("hidden")
        logging.getLogger("probe").warning("shown")

        assert stream.getvalue() == "[WARNING] shown\n"

    def test_extra_context_redacts_tokens(self):
        ctx = extra_context(event="x", github_token="ghp_abcdef", skipped=None)
        assert ctx == {"event": "x", "github_token": "ghp_***"}

    def test_safe_url_strips_credentials_and_query(self):
        assert safe_url("https://user:pw@example.com:8443/a?token=1") == "https://example.com:8443/a"
