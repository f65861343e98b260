# reader_sync/parsers/csv_tokenizer.py
"""Tokenizer for the Project Gutenberg catalog dump.

The catalog is split line by line and each line is scanned character by
character. A double quote only toggles the "inside quotes" state, so quotes
never reach the output and a comma inside quotes stays part of the field.
An unmatched quote leaves the rest of the line inside quotes. Quoted
newlines are not joined: every line break starts a new row.
"""
from typing import List

QUOTE = '"'
DELIMITER = ','


def tokenize_row(line: str) -> List[str]:
    """Split a single catalog line into fields."""
    fields: List[str] = []
    current: List[str] = []
    inside_quotes = False

    for char in line:
        if char == QUOTE:
            inside_quotes = not inside_quotes
        elif char == DELIMITER and not inside_quotes:
            fields.append(''.join(current))
            current = []
        else:
            current.append(char)

    fields.append(''.join(current))
    return fields


def tokenize_csv(text: str) -> List[List[str]]:
    """
    Split catalog text into rows of string fields.

    Args:
        text: Full text of the catalog file, header row included

    Returns:
        One list of fields per non-blank data row, in file order
    """
    lines = text.splitlines()
    # Gutenberg dumps always start with a header
    if lines:
        lines = lines[1:]

    return [tokenize_row(line) for line in lines if line.strip()]
