"""Shared base class for workbook readers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from sheetcsv.models import SheetGrid


class BaseWorkbookReader(ABC):
    """Context-manager base satisfying the ``WorkbookReader`` protocol.

    Subclasses open the workbook in ``__init__`` and release it in
    :meth:`close`.
    """

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path

    def __enter__(self) -> BaseWorkbookReader:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @abstractmethod
    def sheet_names(self) -> list[str]:
        ...

    @abstractmethod
    def worksheet_range(self, name: str) -> SheetGrid:
        ...

    def close(self) -> None:
        return None

    def _require_sheet(self, name: str) -> None:
        if name not in self.sheet_names():
            raise KeyError(f"Sheet '{name}' not found in {self.file_path}")
