"""
Delimited text files for route coordinates and fitted pages.

Route files hold one "x<delim>y" pair per line. Result files hold one
page per line: centre x, centre y, page id, orientation flag ("true"
for landscape, "false" for portrait) and scale. Floats are written with
repr() so they read back exactly.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from .errors import ErrorKind, PageFitError
from .page import Page
from .types import Coordinate, Orientation, PageRecord

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_lines(path: PathLike) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().splitlines()
    except OSError as exc:
        raise PageFitError(ErrorKind.IO_FAILURE, f"cannot read file: {exc}", str(path)) from exc


def _write_lines(path: PathLike, rows: Iterable[Sequence[str]], delimiter: str) -> int:
    count = 0
    try:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for row in rows:
                f.write(delimiter.join(row))
                f.write("\n")
                count += 1
    except OSError as exc:
        raise PageFitError(ErrorKind.IO_FAILURE, f"cannot write file: {exc}", str(path)) from exc
    return count


def _parse_float(text: str, line_number: int, what: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise PageFitError(
            ErrorKind.PARSE_FAILURE,
            f"{what} is not a number: {text!r}",
            line_number,
        ) from None


def parse_coordinate_line(line: str, line_number: int, delimiter: str = ",") -> Coordinate:
    """
    Parse one "x<delimiter>y" line.

    Args:
        line: Raw line text; surrounding whitespace is ignored
        line_number: 1-based line number for error reporting
        delimiter: Field separator

    Returns:
        Parsed Coordinate

    Raises:
        PageFitError: If the line does not hold exactly two numbers
    """
    fields = line.strip().split(delimiter)
    if len(fields) != 2:
        raise PageFitError(
            ErrorKind.PARSE_FAILURE,
            f"expected 2 fields separated by {delimiter!r}, got {len(fields)}",
            line_number,
        )

    x = _parse_float(fields[0].strip(), line_number, "x")
    y = _parse_float(fields[1].strip(), line_number, "y")
    return Coordinate(x, y)


def load_coordinates(path: PathLike, delimiter: str = ",") -> List[Coordinate]:
    """
    Read a route file.

    Blank lines (including a trailing newline) are skipped.

    Args:
        path: Route file
        delimiter: Field separator

    Returns:
        Coordinates in file order

    Raises:
        PageFitError: On unreadable files or malformed lines
    """
    coordinates: List[Coordinate] = []

    for line_number, line in enumerate(_read_lines(path), start=1):
        if not line.strip():
            continue
        coordinates.append(parse_coordinate_line(line, line_number, delimiter))

    logger.info("Loaded %d coordinates from %s", len(coordinates), path)
    return coordinates


def save_coordinates(path: PathLike, coordinates: Iterable[Coordinate], delimiter: str = ",") -> None:
    """
    Write a route file, one coordinate per line.

    Args:
        path: Output file
        coordinates: Coordinates to write
        delimiter: Field separator
    """
    rows = ((repr(c.x), repr(c.y)) for c in coordinates)
    count = _write_lines(path, rows, delimiter)
    logger.info("Wrote %d coordinates to %s", count, path)


def save_pages(
    path: PathLike,
    pages: Iterable[Union[Page, PageRecord]],
    delimiter: str = ",",
) -> None:
    """
    Write fitted pages to a result file, one page per line.

    Args:
        path: Output file
        pages: Pages or page records, in result order
        delimiter: Field separator
    """
    records = (p if isinstance(p, PageRecord) else p.to_record() for p in pages)
    count = _write_lines(path, (r.to_fields() for r in records), delimiter)
    logger.info("Wrote %d pages to %s", count, path)


def load_pages(path: PathLike, delimiter: str = ",") -> List[PageRecord]:
    """
    Read a result file written by save_pages().

    Args:
        path: Result file
        delimiter: Field separator

    Returns:
        Page records in file order

    Raises:
        PageFitError: On unreadable files or malformed lines
    """
    records: List[PageRecord] = []

    for line_number, line in enumerate(_read_lines(path), start=1):
        if not line.strip():
            continue

        fields = [f.strip() for f in line.strip().split(delimiter)]
        if len(fields) != 5:
            raise PageFitError(
                ErrorKind.PARSE_FAILURE,
                f"expected 5 fields separated by {delimiter!r}, got {len(fields)}",
                line_number,
            )

        centre_x, centre_y, page_id, flag, scale = fields
        try:
            orientation = Orientation.from_flag(flag)
        except PageFitError as exc:
            raise PageFitError(ErrorKind.PARSE_FAILURE, exc.message, line_number) from None

        records.append(
            PageRecord(
                centre_x=_parse_float(centre_x, line_number, "centre x"),
                centre_y=_parse_float(centre_y, line_number, "centre y"),
                page_id=page_id,
                orientation=orientation,
                scale=_parse_float(scale, line_number, "scale"),
            )
        )

    return records
