import csv
import io
import logging
from pathlib import Path

from swing_lab.domain.table import RawTable

logger = logging.getLogger(__name__)


def strip_bom(text: str) -> str:
    """Strip a UTF-8 BOM from the start of text (spreadsheet exports often include it)."""
    return text.removeprefix("\ufeff")


def parse_table(text: str, *, delimiter: str = ",") -> RawTable:
    """Parse delimited text into a ``RawTable``.

    Header names and cell values are whitespace-trimmed, quoted fields are
    honoured, and fully blank lines are skipped. Short rows are padded with
    empty strings; surplus cells on long rows are discarded.
    """
    reader = csv.reader(io.StringIO(strip_bom(text)), delimiter=delimiter)
    headers: tuple[str, ...] | None = None
    rows: list[dict[str, str]] = []
    for record in reader:
        if not any(cell.strip() for cell in record):
            continue
        if headers is None:
            headers = tuple(cell.strip() for cell in record)
            continue
        cells = [cell.strip() for cell in record]
        cells.extend([""] * (len(headers) - len(cells)))
        rows.append(dict(zip(headers, cells)))
    if headers is None:
        return RawTable(headers=(), rows=())
    logger.debug("Parsed %d rows with %d columns", len(rows), len(headers))
    return RawTable(headers=headers, rows=tuple(rows))


def read_table(path: str | Path, *, encoding: str = "utf-8", delimiter: str = ",") -> RawTable:
    path = Path(path)
    logger.debug("Reading CSV %s", path)
    with open(path, encoding=encoding, newline="") as f:
        table = parse_table(f.read(), delimiter=delimiter)
    logger.debug("Read %d rows from %s", len(table), path)
    return table
