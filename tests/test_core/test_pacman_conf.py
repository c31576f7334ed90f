from __future__ import annotations

import subprocess
from typing import Dict, List
from unittest.mock import MagicMock, patch

import pytest

from pacjump.core import pacman_conf
from pacjump.core.pacman_conf import (
    SigLevel,
    fold_siglevels,
    process_siglevel,
    read_conf,
)
from pacjump.exceptions import ConfigError


def _completed(stdout: bytes) -> MagicMock:
    completed = MagicMock(spec=subprocess.CompletedProcess)
    completed.stdout = stdout
    return completed


@pytest.mark.unit
class TestProcessSiglevel:
    """Tests for process_siglevel."""

    def test_empty_keeps_default(self) -> None:
        assert process_siglevel(SigLevel.USE_DEFAULT, "") is SigLevel.USE_DEFAULT
        assert process_siglevel(SigLevel.PACKAGE, "   ") is SigLevel.PACKAGE

    def test_package_required_clears_use_default(self) -> None:
        assert process_siglevel(SigLevel.USE_DEFAULT, "PackageRequired") == SigLevel.PACKAGE

    def test_required_clears_optional(self) -> None:
        level = SigLevel.DATABASE | SigLevel.DATABASE_OPTIONAL

        assert process_siglevel(level, "DatabaseRequired") == SigLevel.DATABASE

    def test_never(self) -> None:
        level = SigLevel.PACKAGE | SigLevel.DATABASE

        assert process_siglevel(level, "PackageNever") == SigLevel.DATABASE

    def test_trust_all_and_trusted_only(self) -> None:
        trusting = process_siglevel(SigLevel.PACKAGE, "PackageTrustAll")

        assert trusting == (
            SigLevel.PACKAGE | SigLevel.PACKAGE_MARGINAL_OK | SigLevel.PACKAGE_UNKNOWN_OK
        )
        assert process_siglevel(trusting, "PackageTrustedOnly") == SigLevel.PACKAGE

    def test_unknown_directive(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            process_siglevel(SigLevel.USE_DEFAULT, "Required")

        assert exc_info.value.option == "SigLevel"
        assert "Required" in str(exc_info.value)


@pytest.mark.unit
class TestFoldSiglevels:
    """Tests for fold_siglevels."""

    def test_arch_default(self) -> None:
        answer = "PackageRequired\nPackageTrustedOnly\nDatabaseOptional\nDatabaseTrustedOnly"

        level = fold_siglevels(SigLevel.USE_DEFAULT, answer)

        assert level == SigLevel.PACKAGE | SigLevel.DATABASE | SigLevel.DATABASE_OPTIONAL
        assert int(level) == 3073

    def test_repo_stacks_on_default(self) -> None:
        default = SigLevel.PACKAGE | SigLevel.DATABASE

        assert fold_siglevels(default, "DatabaseNever") == SigLevel.PACKAGE

    def test_no_lines(self) -> None:
        assert fold_siglevels(SigLevel.USE_DEFAULT, "") is SigLevel.USE_DEFAULT


@pytest.mark.unit
class TestReadConf:
    """Tests for read_conf and its helpers."""

    def test_strips_one_trailing_newline(self) -> None:
        with patch("subprocess.run", return_value=_completed(b"/\n")) as run:
            assert read_conf(["RootDir"]) == "/"

        args, kwargs = run.call_args
        assert args[0] == ["pacman-conf", "RootDir"]
        assert kwargs["env"]["LC_ALL"] == "C.UTF-8"

    def test_keeps_inner_newlines(self) -> None:
        with patch("subprocess.run", return_value=_completed(b"core\nextra\n\n")):
            assert read_conf(["--repo-list"]) == "core\nextra\n"

    def test_missing_binary(self) -> None:
        with patch("subprocess.run", side_effect=FileNotFoundError("pacman-conf")):
            assert read_conf(["RootDir"]) is None

    def test_defaults_when_unavailable(self) -> None:
        with patch("subprocess.run", side_effect=OSError("boom")):
            assert pacman_conf.root_dir() == "/"
            assert pacman_conf.db_path() == "/var/lib/pacman/"
            assert pacman_conf.repo_list() == []
            assert pacman_conf.default_siglevel() is SigLevel.USE_DEFAULT

    def test_repo_list(self) -> None:
        with patch("subprocess.run", return_value=_completed(b"core\nextra\nmultilib\n")):
            assert pacman_conf.repo_list() == ["core", "extra", "multilib"]

    def test_repo_siglevel_queries_repo(self) -> None:
        answers: Dict[str, bytes] = {
            "--repo=extra": b"DatabaseRequired\n",
        }
        calls: List[List[str]] = []

        def fake_run(argv, **kwargs):
            calls.append(argv)
            return _completed(answers.get(argv[1], b""))

        with patch("subprocess.run", side_effect=fake_run):
            level = pacman_conf.repo_siglevel("extra", SigLevel.PACKAGE)

        assert calls == [["pacman-conf", "--repo=extra", "SigLevel"]]
        assert level == SigLevel.PACKAGE | SigLevel.DATABASE
