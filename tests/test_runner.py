"""Tests for src.changelog.runner ensuring configuration flows into the routine.

Run with:
    pytest tests/test_runner.py --maxfail=1 -v --cov=src.changelog.runner --cov-report=term-missing
"""

from unittest.mock import MagicMock, patch

import pytest

from src.changelog import runner
from src.changelog.context import ChangelogContext
from src.changelog.core import ActionsCore
from src.changelog.loader import RoutineLoadError


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("LIFECYCLE_VERSION", raising=False)
    monkeypatch.delenv("CHANGELOG_SCRIPT", raising=False)
    return monkeypatch


@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_exits_when_token_missing(mock_client, mock_load, clean_env, capsys):
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    with pytest.raises(SystemExit) as excinfo:
        runner.main([])
    assert excinfo.value.code != 0
    assert "GITHUB_TOKEN" in capsys.readouterr().err
    mock_client.assert_not_called()
    mock_load.assert_not_called()


@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_exits_when_version_missing(mock_client, mock_load, clean_env, capsys):
    clean_env.setenv("GITHUB_TOKEN", "secret")
    with pytest.raises(SystemExit) as excinfo:
        runner.main([])
    assert excinfo.value.code != 0
    assert "LIFECYCLE_VERSION" in capsys.readouterr().err
    mock_client.assert_not_called()
    mock_load.assert_not_called()


@pytest.mark.parametrize(
    "token, version, missing",
    [("secret", "", "LIFECYCLE_VERSION"), ("", "0.20.0", "GITHUB_TOKEN")],
)
@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_exits_when_value_empty(mock_client, mock_load, clean_env, capsys, token, version, missing):
    clean_env.setenv("GITHUB_TOKEN", token)
    clean_env.setenv("LIFECYCLE_VERSION", version)
    with pytest.raises(SystemExit) as excinfo:
        runner.main([])
    assert excinfo.value.code != 0
    assert missing in capsys.readouterr().err
    mock_client.assert_not_called()
    mock_load.assert_not_called()


@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_invokes_routine_once_with_context(mock_client, mock_load, clean_env):
    clean_env.setenv("GITHUB_TOKEN", "secret")
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    routine = MagicMock(return_value="ignored")
    mock_load.return_value = routine

    runner.main([])

    mock_client.assert_called_once_with("secret")
    mock_load.assert_called_once_with("index.py")
    routine.assert_called_once()
    context = routine.call_args.args[0]
    assert isinstance(context, ChangelogContext)
    assert context.repository == "buildpacks/lifecycle"
    assert context.version == "0.20.0"
    assert context.client is mock_client.return_value
    assert isinstance(context.logger, ActionsCore)


@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_script_path_from_cli_and_env(mock_client, mock_load, clean_env):
    clean_env.setenv("GITHUB_TOKEN", "secret")
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    runner.main(["--script", "scripts/changelog.py"])
    assert mock_load.call_args.args[0] == "scripts/changelog.py"

    clean_env.setenv("CHANGELOG_SCRIPT", "from_env.py")
    runner.main([])
    assert mock_load.call_args.args[0] == "from_env.py"


@patch("src.changelog.runner.load_routine", side_effect=RoutineLoadError("changelog script not found: x"))
@patch("src.changelog.runner.GitHubClient")
def test_exits_when_routine_cannot_load(mock_client, mock_load, clean_env, capsys):
    clean_env.setenv("GITHUB_TOKEN", "secret")
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    with pytest.raises(SystemExit) as excinfo:
        runner.main([])
    assert excinfo.value.code == 1
    assert "not found" in capsys.readouterr().err


@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_routine_errors_propagate(mock_client, mock_load, clean_env):
    clean_env.setenv("GITHUB_TOKEN", "secret")
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    mock_load.return_value = MagicMock(side_effect=ValueError("boom"))
    with pytest.raises(ValueError):
        runner.main([])


@patch("src.changelog.runner.load_routine")
@patch("src.changelog.runner.GitHubClient")
def test_set_failed_sets_exit_code(mock_client, mock_load, clean_env, capsys):
    clean_env.setenv("GITHUB_TOKEN", "secret")
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    mock_load.return_value = lambda context: context.logger.set_failed("no milestone")
    with pytest.raises(SystemExit) as excinfo:
        runner.main([])
    assert excinfo.value.code == 1
    assert "::error::no milestone" in capsys.readouterr().out


def test_end_to_end_with_script_file(clean_env, tmp_path):
    script = tmp_path / "index.py"
    script.write_text(
        "calls = []\n"
        "def main(context):\n"
        "    calls.append(context)\n"
        "    context.logger.info(f'{context.repository}@{context.version}')\n"
    )
    clean_env.setenv("GITHUB_TOKEN", "secret")
    clean_env.setenv("LIFECYCLE_VERSION", "0.20.0")
    clean_env.chdir(tmp_path)

    with patch("src.changelog.runner.ActionsCore") as mock_core:
        mock_core.return_value.exit_code = 0
        runner.main([])
    mock_core.return_value.info.assert_called_once_with("buildpacks/lifecycle@0.20.0")
