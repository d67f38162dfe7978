"""Unit tests for command line parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from envpull.args import ArgumentError, HelpRequested, parse_args


def test_defaults(tmp_path: Path) -> None:
    options = parse_args([], cwd=tmp_path)

    assert options.cwd == tmp_path
    assert options.env_file_root == ".env"
    assert options.yes is False
    assert options.debug is False
    assert options.token is None


def test_flags_and_path(tmp_path: Path) -> None:
    options = parse_args(
        ["app", "-y", "-d", "--env", ".env.local", "--token", "abc", "-Q", "/tmp/global"],
        cwd=tmp_path,
    )

    assert options.cwd == tmp_path / "app"
    assert options.yes is True
    assert options.debug is True
    assert options.env_file_root == ".env.local"
    assert options.token == "abc"
    assert options.global_config == Path("/tmp/global")


def test_absolute_path_argument(tmp_path: Path) -> None:
    other = tmp_path / "elsewhere"

    assert parse_args([str(other)], cwd=tmp_path / "cwd").cwd == other


@pytest.mark.parametrize("flag", ["-h", "--help"])
def test_help_is_requested(flag: str) -> None:
    with pytest.raises(HelpRequested):
        parse_args([flag])


@pytest.mark.parametrize(
    "argv",
    [
        ["--unknown"],
        ["--env"],
        ["--env", ""],
        ["--env", "nested/.env"],
        ["a", "b"],
    ],
)
def test_malformed_arguments(argv: list[str]) -> None:
    with pytest.raises(ArgumentError):
        parse_args(argv)
