"""Reader protocol for sheetcsv.

Defines the structural-subtyping interface that every workbook reader must
satisfy.  The protocol is ``@runtime_checkable`` so callers can optionally
verify conformance with ``isinstance`` checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sheetcsv.models import SheetGrid


@runtime_checkable
class WorkbookReader(Protocol):
    """Interface for workbook readers (openpyxl, xlrd, pyxlsb, odf)."""

    def sheet_names(self) -> list[str]:
        """Return sheet names in workbook order."""
        ...

    def worksheet_range(self, name: str) -> SheetGrid:
        """Return the used range of the named sheet."""
        ...

    def close(self) -> None:
        """Release any resources held by the reader."""
        ...
