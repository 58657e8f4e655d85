from __future__ import annotations

import subprocess

import pytest

from gl_cli import cli


def test_default_author_prefers_local_scope(git_config) -> None:
    reader = git_config(local="Local Name", **{"global": "Global Name"}, system="System Name")
    assert cli.default_author(reader) == "Local Name"
    assert reader.calls == [("local", "user.name")]


def test_default_author_falls_through_scopes_in_order(git_config) -> None:
    reader = git_config(local="   ", system="  System Name \n")
    assert cli.default_author(reader) == "System Name"
    assert [scope for scope, _ in reader.calls] == ["local", "global", "system"]


def test_default_author_fails_when_no_scope_has_a_name(git_config) -> None:
    reader = git_config()
    with pytest.raises(cli.AuthorResolutionError):
        cli.default_author(reader)


def test_author_default_is_lazy(git_config) -> None:
    reader = git_config(**{"global": "Jane Doe"})
    default = cli.AuthorDefault(reader)
    assert reader.calls == []
    assert cli.resolve_author(default) == "Jane Doe"
    assert cli.resolve_author("Explicit") == "Explicit"


def test_read_git_config_runs_scoped_query(monkeypatch) -> None:
    seen = {}

    def fake_run(cmd, **kwargs):
        seen["cmd"] = cmd
        return subprocess.CompletedProcess(cmd, 0, stdout="Jane Doe\n", stderr="")

    monkeypatch.setattr(cli.subprocess, "run", fake_run)
    assert cli.read_git_config("global") == "Jane Doe"
    assert seen["cmd"] == ["git", "config", "--global", "user.name"]


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("git"), subprocess.CalledProcessError(1, ["git", "config"])],
)
def test_read_git_config_returns_empty_on_failure(monkeypatch, error) -> None:
    def fake_run(cmd, **kwargs):
        raise error

    monkeypatch.setattr(cli.subprocess, "run", fake_run)
    assert cli.read_git_config("local") == ""


def test_read_git_config_keeps_undecodable_names(monkeypatch) -> None:
    seen = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        return subprocess.CompletedProcess(cmd, 0, stdout=b"Jos\xe9\n".decode("utf-8", "surrogateescape"), stderr="")

    monkeypatch.setattr(cli.subprocess, "run", fake_run)
    assert cli.read_git_config("local") == "Jos\udce9"
    assert seen["errors"] == "surrogateescape"


def test_unusable_git_falls_through_to_missing_author(monkeypatch, tmp_path, capsys) -> None:
    def fake_run(cmd, **kwargs):
        raise PermissionError(13, "Permission denied", "git")

    monkeypatch.setattr(cli.subprocess, "run", fake_run)
    monkeypatch.chdir(tmp_path)

    assert cli.main(["mit"]) == 1
    assert "Could not detect author name" in capsys.readouterr().err
    assert not (tmp_path / "LICENSE").exists()
