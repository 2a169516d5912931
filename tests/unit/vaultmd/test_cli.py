"""Smoke tests for the vaultmd command line."""

import io
import json
from unittest.mock import patch

import pytest

from vaultmd.cli import main, parse_args
from vaultmd.commands.vault import CmdList, CmdSet


@pytest.fixture(autouse=True)
def vault_dir(tmp_path, monkeypatch):
    path = tmp_path / "vault"
    monkeypatch.setenv("VAULT_DIR", str(path))
    return path


@pytest.fixture
def stdin(monkeypatch):
    def _set(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return _set


def run(*argv):
    return main(list(argv))


GLOBAL = ("--scope", "global")
REPO = ("--scope", "repository", "--repo", "/src/proj")


class TestParser:
    def test_dispatch(self):
        args = parse_args(["set", "notes", *GLOBAL])
        assert args.func is CmdSet
        assert args.key == "notes"
        assert args.scope == "global"

    def test_list_flags(self):
        args = parse_args(["list", "--all-scopes", "--include-archived", "-v"])
        assert args.func is CmdList
        assert args.all_scopes and args.include_archived and args.verbose

    @pytest.mark.parametrize(
        "argv, verbose",
        [
            (["-v", "list"], True),
            (["list", "-v"], True),
            (["--verbose", "list", "--all-scopes"], True),
            (["list"], False),
        ],
    )
    def test_verbose_at_either_level(self, argv, verbose):
        assert parse_args(argv).verbose is verbose

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestSetCat:
    """Verify storing and reading through the CLI."""

    def test_set_from_stdin(self, stdin, capsys):
        stdin("hello\tworld\n")
        assert run("set", "notes", *GLOBAL) == 0
        path = capsys.readouterr().out.strip()
        assert path.endswith("notes_v1.txt")

        assert run("cat", "notes", *GLOBAL) == 0
        assert capsys.readouterr().out == "hello\tworld\n"

    def test_set_from_file(self, tmp_path, capsys):
        source = tmp_path / "in.md"
        source.write_text("# title\n", encoding="utf-8")
        assert run("set", "doc", "-f", str(source), "-d", "desc", *REPO) == 0
        capsys.readouterr()

        assert run("info", "doc", "--format", "json", *REPO) == 0
        info = json.loads(capsys.readouterr().out)
        assert info["key"] == "doc"
        assert info["description"] == "desc"
        assert info["version"] == 1
        assert info["scope"] == "/src/proj"

    def test_get_prints_path(self, stdin, capsys):
        stdin("x")
        run("set", "notes", *GLOBAL)
        stored = capsys.readouterr().out.strip()
        assert run("get", "notes", *GLOBAL) == 0
        assert capsys.readouterr().out.strip() == stored

    def test_version_flag(self, stdin, capsys):
        for text in ("one", "two"):
            stdin(text)
            run("set", "notes", *GLOBAL)
        capsys.readouterr()
        assert run("cat", "notes", "--ver", "1", *GLOBAL) == 0
        assert capsys.readouterr().out == "one"

    def test_all_scopes_fallback(self, stdin, capsys):
        stdin("global text")
        run("set", "notes", *GLOBAL)
        capsys.readouterr()
        assert run("cat", "notes", *REPO) == 1
        assert run("cat", "notes", "--all-scopes", *REPO) == 0
        assert capsys.readouterr().out == "global text"

    def test_missing_key(self, capsys):
        assert run("cat", "nope", *GLOBAL) == 1
        assert "not found" in capsys.readouterr().err


class TestList:
    def test_table(self, stdin, capsys):
        stdin("x")
        run("set", "alpha", *REPO)
        capsys.readouterr()
        assert run("list", *REPO) == 0
        out = capsys.readouterr().out
        assert "alpha" in out
        assert "proj" in out

    def test_empty(self, capsys):
        assert run("list", *REPO) == 0
        assert "No entries found." in capsys.readouterr().out

    def test_json_all_scopes(self, stdin, capsys):
        stdin("x")
        run("set", "a", *GLOBAL)
        stdin("y")
        run("set", "b", *REPO)
        capsys.readouterr()
        assert run("list", "--all-scopes", "--format", "json") == 0
        rows = json.loads(capsys.readouterr().out)
        assert {(r["scope"], r["key"]) for r in rows} == {
            ("global", "a"), ("proj", "b")
        }


class TestMutations:
    """Verify delete, archive, restore, move and delete-scope."""

    def test_delete_version_and_key(self, stdin, capsys):
        for text in ("one", "two"):
            stdin(text)
            run("set", "notes", *GLOBAL)
        assert run("delete", "notes", "--ver", "2", *GLOBAL) == 0
        assert run("delete", "notes", "--ver", "2", *GLOBAL) == 1
        assert run("delete", "notes", *GLOBAL) == 0
        assert run("delete", "notes", *GLOBAL) == 1

    def test_archive_restore(self, stdin, capsys):
        stdin("x")
        run("set", "notes", *GLOBAL)
        assert run("archive", "notes", *GLOBAL) == 0
        assert run("archive", "notes", *GLOBAL) == 1
        assert run("restore", "notes", *GLOBAL) == 0
        assert run("restore", "notes", *GLOBAL) == 1

    def test_move(self, stdin, capsys):
        stdin("x")
        run("set", "notes", *REPO)
        assert run("move", "notes", *REPO, "--to-scope", "global") == 0
        capsys.readouterr()
        assert run("cat", "notes", *GLOBAL) == 0
        assert capsys.readouterr().out == "x"

    def test_move_conflict(self, stdin, capsys):
        stdin("x")
        run("set", "notes", *REPO)
        stdin("y")
        run("set", "notes", *GLOBAL)
        assert run("move", "notes", *REPO, "--to-scope", "global") == 1
        assert "already exists" in capsys.readouterr().err

    def test_delete_scope(self, stdin, capsys):
        stdin("x")
        run("set", "notes", *REPO)
        assert run("delete-scope", *REPO) == 0
        assert "1 version" in capsys.readouterr().out
        assert run("cat", "notes", *REPO) == 1

    def test_delete_global_scope_refused(self, capsys):
        assert run("delete-scope", *GLOBAL) == 1

    def test_delete_scope_all_branches(self, stdin, capsys):
        stdin("x")
        run("set", "notes", *REPO)
        stdin("y")
        run(
            "set", "notes", "--scope", "branch", "--repo", "/src/proj",
            "--branch", "dev",
        )
        capsys.readouterr()
        assert run("delete-scope", *REPO, "--all-branches") == 0
        assert "2 versions" in capsys.readouterr().out


class TestEdit:
    def test_edit_saves_new_version(self, stdin, capsys):
        stdin("before")
        run("set", "notes", *GLOBAL)
        with patch(
            "vaultmd.infrastructure.editor.edit_text",
            return_value=(0, "after"),
        ):
            assert run("edit", "notes", *GLOBAL) == 0
        capsys.readouterr()
        run("cat", "notes", *GLOBAL)
        assert capsys.readouterr().out == "after"

    def test_edit_unchanged(self, stdin, capsys):
        stdin("same")
        run("set", "notes", *GLOBAL)
        with patch(
            "vaultmd.infrastructure.editor.edit_text",
            return_value=(0, "same"),
        ):
            assert run("edit", "notes", *GLOBAL) == 0
        assert "No changes made." in capsys.readouterr().out

    def test_editor_failure(self, stdin, capsys):
        stdin("same")
        run("set", "notes", *GLOBAL)
        with patch(
            "vaultmd.infrastructure.editor.edit_text",
            return_value=(2, ""),
        ):
            assert run("edit", "notes", *GLOBAL) == 1
