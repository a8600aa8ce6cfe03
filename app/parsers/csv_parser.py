"""
app/parsers/csv_parser.py

Quote-aware CSV tokenizer for hand-edited spreadsheet exports.

The parser walks the text one character at a time. A double quote toggles
quoted mode anywhere in a field, a doubled quote inside quoted mode is a
literal quote, and commas / line breaks inside quoted mode belong to the
cell. Fields are trimmed and blank rows are dropped.
"""

from __future__ import annotations

_QUOTE = '"'
_DELIMITER = ","
_CR = "\r"
_LF = "\n"
_BOM = "\ufeff"


class CSVParseError(ValueError):
    """
    Raised when CSV content cannot be tokenized.
    """


def parse_csv_content(content: str) -> list[list[str]]:
    """
    Split raw CSV text into rows of trimmed field strings.

    Accepts LF, CR and CRLF row terminators; the last row does not need a
    terminator. Rows whose fields are all blank are not returned.
    """

    if not isinstance(content, str):
        raise CSVParseError(
            f"CSV content must be text, got {type(content).__name__}."
        )

    text = content[1:] if content.startswith(_BOM) else content

    rows: list[list[str]] = []
    current_row: list[str] = []
    current_cell: list[str] = []
    inside_quotes = False

    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        next_char = text[index + 1] if index + 1 < length else ""

        if char == _QUOTE:
            if inside_quotes and next_char == _QUOTE:
                current_cell.append(_QUOTE)
                index += 1
            else:
                inside_quotes = not inside_quotes
        elif char == _DELIMITER and not inside_quotes:
            current_row.append("".join(current_cell).strip())
            current_cell = []
        elif char in (_CR, _LF) and not inside_quotes:
            if current_cell or current_row:
                current_row.append("".join(current_cell).strip())
                _append_row(rows, current_row)
                current_row = []
                current_cell = []
            if char == _CR and next_char == _LF:
                index += 1
        else:
            current_cell.append(char)
        index += 1

    if current_cell or current_row:
        current_row.append("".join(current_cell).strip())
        _append_row(rows, current_row)

    return rows


def _append_row(rows: list[list[str]], row: list[str]) -> None:
    if any(cell for cell in row):
        rows.append(row)
