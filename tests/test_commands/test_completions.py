from __future__ import annotations

import pytest
from click.testing import CliRunner

from pacjump.cli import cli


@pytest.fixture(autouse=True)
def no_color(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.mark.unit
class TestCompletions:
    """Tests for the completions command."""

    @pytest.mark.parametrize(
        "shell, marker",
        [
            ("zsh", "_PACJUMP_COMPLETE=zsh_complete"),
            ("fish", "_PACJUMP_COMPLETE=fish_complete"),
        ],
    )
    def test_script_mentions_complete_var(self, shell: str, marker: str) -> None:
        result = CliRunner().invoke(cli, ["completions", shell])

        assert result.exit_code == 0, result.output
        assert marker in result.output
        assert "pacjump" in result.output

    def test_shell_name_is_case_insensitive(self) -> None:
        result = CliRunner().invoke(cli, ["completions", "ZSH"])

        assert result.exit_code == 0
        assert "#compdef pacjump" in result.output

    def test_unknown_shell(self) -> None:
        result = CliRunner().invoke(cli, ["completions", "tcsh"])

        assert result.exit_code == 2
