"""CSV parsing into positional tables."""

import csv
import io

from .errors import ParseError
from .models import Table


def parse_table(data: bytes) -> Table:
    """
    Parse CSV bytes into a table.

    Blank lines are skipped. Every record must have the same number of
    fields as the first one.

    Args:
        data: Raw CSV content (UTF-8, optional BOM)

    Returns:
        List of rows, each a list of string fields

    Raises:
        ParseError: If content is not valid UTF-8 or not well-formed CSV
    """
    try:
        text = data.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise ParseError(f"Content is not valid UTF-8: {e}") from e

    rows: Table = []
    expected_fields = None
    reader = csv.reader(io.StringIO(text, newline=''), strict=True)

    try:
        for row in reader:
            if not row:
                continue
            if expected_fields is None:
                expected_fields = len(row)
            elif len(row) != expected_fields:
                raise ParseError(
                    f"record on line {reader.line_num}: wrong number of fields",
                    line=reader.line_num,
                    expected=expected_fields,
                    actual=len(row),
                )
            rows.append(row)
    except csv.Error as e:
        raise ParseError(f"record on line {reader.line_num}: {e}", line=reader.line_num) from e

    return rows
