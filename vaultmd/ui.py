"""Terminal output for the command line.

Commands write through the module-level ``ui`` object so tests can
capture stdout and stderr without touching the consoles directly.
"""

import json
import sys
from typing import Any, Iterable, Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text


class Output:
    """Thin wrapper over two rich consoles, one per output stream."""

    def _console(self, stderr: bool = False) -> Console:
        # Built per call so redirected sys.stdout/sys.stderr are honoured.
        return Console(
            file=sys.stderr if stderr else sys.stdout,
            highlight=False,
            soft_wrap=True,
        )

    def write(self, *objects: Any, styled: bool = False, end: str = "\n") -> None:
        self._console().print(*objects, markup=styled, end=end)

    def error_write(self, *objects: Any, styled: bool = False) -> None:
        self._console(stderr=True).print(*objects, markup=styled)

    def write_raw(self, text: str) -> None:
        """Write text byte-for-byte, with no markup or tab expansion."""
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_json(self, data: Any) -> None:
        self.write_raw(json.dumps(data, indent=2, default=str) + "\n")

    def table(
        self,
        rows: Iterable[Sequence[Any]],
        headers: Sequence[str],
        title: Optional[str] = None,
    ) -> None:
        table = Table(title=title)
        for header in headers:
            table.add_column(header, overflow="fold")
        for row in rows:
            table.add_row(
                *(Text("" if cell is None else str(cell)) for cell in row)
            )
        self._console().print(table)


ui = Output()
