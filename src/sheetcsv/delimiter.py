"""Field delimiter option for delimited output.

A ``Delimiter`` wraps a single ASCII byte that is used both as the CSV
field separator and to pick the output file extension in named-files mode.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from sheetcsv.errors import ConvertError, ErrorCode

_ESCAPES: dict[str, int] = {
    r"\t": ord("\t"),
    r"\n": ord("\n"),
}


class Delimiter(BaseModel):
    """A single ASCII byte used as the output field separator."""

    model_config = ConfigDict(frozen=True)

    byte: int = Field(ge=0, le=127)

    def as_byte(self) -> int:
        return self.byte

    def as_char(self) -> str:
        return chr(self.byte)

    def to_file_extension(self) -> str:
        """Return ``"tsv"`` for tab and ``"csv"`` for every other byte."""
        if self.byte == ord("\t"):
            return "tsv"
        return "csv"

    def __str__(self) -> str:
        return self.as_char()


DEFAULT_DELIMITER = Delimiter(byte=ord(","))


def parse_delimiter(raw: str) -> Delimiter | ConvertError:
    """Parse a delimiter option value.

    Accepts the escape literals ``\\t`` and ``\\n`` or any single ASCII
    character.  Returns a ``ConvertError`` instead of raising so callers can
    collect every configuration problem before any I/O.
    """
    if raw in _ESCAPES:
        return Delimiter(byte=_ESCAPES[raw])

    if len(raw) != 1:
        return ConvertError(
            code=ErrorCode.E_CONFIG_BAD_DELIMITER,
            message=f"Could not convert '{raw}' to a single ASCII character.",
            stage="config",
        )

    if not raw.isascii():
        return ConvertError(
            code=ErrorCode.E_CONFIG_BAD_DELIMITER,
            message=f"Could not convert '{raw}' to ASCII delimiter.",
            stage="config",
        )

    return Delimiter(byte=ord(raw))
