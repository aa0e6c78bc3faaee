"""Sheet selection by zero-based position or by exact name.

``parse_selector`` turns a raw ``--select`` value into either a ``ById``
or a ``ByName`` selector.  Text that looks like a non-negative integer is
always treated as a position, so a sheet literally named ``"3"`` can only
be reached by its index.
"""

from __future__ import annotations

import re
from typing import Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from sheetcsv.errors import ConvertError, ErrorCode

_INDEX_RE = re.compile(r"\+?[0-9]+")


class ById(BaseModel):
    """Select the sheet at a zero-based position."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)

    def resolve(self, names: Sequence[str]) -> str | ConvertError:
        if self.index >= len(names):
            return ConvertError(
                code=ErrorCode.E_SELECT_ID_OUT_OF_RANGE,
                message=(
                    f"sheet id `{self.index}` is not valid - only "
                    f"{len(names)} sheets available"
                ),
                stage="select",
            )
        return names[self.index]


class ByName(BaseModel):
    """Select the sheet whose name matches exactly (case-sensitive)."""

    model_config = ConfigDict(frozen=True)

    name: str

    def resolve(self, names: Sequence[str]) -> str | ConvertError:
        for candidate in names:
            if candidate == self.name:
                return candidate
        return ConvertError(
            code=ErrorCode.E_SELECT_NAME_NOT_FOUND,
            message=f"sheet name `{self.name}` is not in ({', '.join(names)})",
            sheet_name=self.name,
            stage="select",
        )


SheetSelector = Union[ById, ByName]


def parse_selector(raw: str) -> SheetSelector:
    """Interpret *raw* as a position when it is a non-negative integer."""
    if _INDEX_RE.fullmatch(raw):
        return ById(index=int(raw))
    return ByName(name=raw)
