"""Tests for the editor launcher."""

from unittest.mock import patch

from vaultmd.infrastructure.editor import DEFAULT_EDITOR, edit_text, get_editor


class TestGetEditor:
    def test_visual_wins(self, monkeypatch):
        monkeypatch.setenv("VISUAL", "code -w")
        monkeypatch.setenv("EDITOR", "nano")
        assert get_editor() == "code -w"

    def test_editor(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.setenv("EDITOR", "nano")
        assert get_editor() == "nano"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("VISUAL", raising=False)
        monkeypatch.delenv("EDITOR", raising=False)
        assert get_editor() == DEFAULT_EDITOR


class TestEditText:
    """Verify the temp-file round trip with a fake editor."""

    def test_returns_edited_text(self, monkeypatch):
        monkeypatch.setenv("VISUAL", "fake-editor --wait")
        calls = []

        def fake_call(cmd):
            calls.append(cmd)
            with open(cmd[-1], "a", encoding="utf-8") as fobj:
                fobj.write(" world")
            return 0

        with patch(
            "vaultmd.infrastructure.editor.subprocess.call",
            side_effect=fake_call,
        ):
            code, text = edit_text("hello")

        assert code == 0
        assert text == "hello world"
        assert calls[0][:2] == ["fake-editor", "--wait"]

    def test_temp_file_removed(self, monkeypatch):
        import os

        monkeypatch.setenv("VISUAL", "fake-editor")
        seen = []

        def fake_call(cmd):
            seen.append(cmd[-1])
            return 1

        with patch(
            "vaultmd.infrastructure.editor.subprocess.call",
            side_effect=fake_call,
        ):
            code, text = edit_text("x")

        assert code == 1
        assert text == "x"
        assert not os.path.exists(seen[0])
