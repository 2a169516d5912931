"""Launch the user's editor on a temporary file."""

import os
import shlex
import subprocess
import tempfile

DEFAULT_EDITOR = "vi"


def get_editor() -> str:
    return os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR


def edit_text(initial: str = "", suffix: str = ".md") -> tuple[int, str]:
    """Open ``initial`` in the editor and return what the user saved.

    Args:
        initial: Text the file starts with.
        suffix: Temporary file suffix, so editors pick a syntax mode.

    Returns:
        Tuple of (editor exit code, file content after editing).
    """
    fd, path = tempfile.mkstemp(prefix="vaultmd-", suffix=suffix)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fobj:
            fobj.write(initial)
        cmd = [*shlex.split(get_editor()), path]
        returncode = subprocess.call(cmd)  # noqa: S603
        with open(path, encoding="utf-8") as fobj:
            return returncode, fobj.read()
    finally:
        os.remove(path)
