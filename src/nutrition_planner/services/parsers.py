"""CSV parsers for the food list and the macro-day export."""

import csv
import re
from collections.abc import Iterator
from datetime import date, datetime
from pathlib import Path

from nutrition_planner.domain.models import Food, MacroDay, MacroInfo

FOODS_HEADER: tuple[str, ...] = ("Food Name",)

MACRO_DAYS_HEADER: tuple[str, ...] = (
    "Date",
    "Expenditure",
    "Trend Weight (kg)",
    "Weight (kg)",
    "Calories (kcal)",
    "Protein (g)",
    "Fat (g)",
    "Carbs (g)",
    "Target Calories (kcal)",
    "Target Protein (g)",
    "Target Fat (g)",
    "Target Carbs (g)",
)

DATE_FORMAT = "%m/%d/%Y"

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity)|nan",
    re.IGNORECASE,
)


class ParseError(ValueError):
    """Raised when a data file cannot be parsed; the whole file is rejected."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
        self.message = message


def parse_foods(path: Path | str) -> tuple[Food, ...]:
    """Parse a single-column food list with a `Food Name` header."""
    foods: list[Food] = []
    for line_number, row in _read_rows(path, header=FOODS_HEADER):
        if len(row) != 1:
            raise ParseError(
                path, f"line {line_number}: expected 1 column, got {len(row)}"
            )
        foods.append(Food(name=row[0]))
    return tuple(foods)


def parse_macro_days(path: Path | str) -> tuple[MacroDay, ...]:
    """Parse the 12-column daily macro export.

    Date, expenditure and weights must be valid or the file is rejected.
    Nutrient columns fall back to zero when blank or not an integer.
    """
    days: list[MacroDay] = []
    for line_number, row in _read_rows(path, header=MACRO_DAYS_HEADER):
        if len(row) != len(MACRO_DAYS_HEADER):
            raise ParseError(
                path,
                f"line {line_number}: expected {len(MACRO_DAYS_HEADER)} columns, "
                f"got {len(row)}",
            )
        try:
            day = MacroDay(
                date=_parse_date(row[0]),
                expenditure=_parse_int(row[1], "expenditure"),
                trend_weight=_parse_float(row[2], "trend weight"),
                weight=_parse_float(row[3], "weight"),
                actual=MacroInfo(
                    calories=_parse_int_or_zero(row[4]),
                    protein=_parse_int_or_zero(row[5]),
                    fat=_parse_int_or_zero(row[6]),
                    carbs=_parse_int_or_zero(row[7]),
                ),
                target=MacroInfo(
                    calories=_parse_int_or_zero(row[8]),
                    protein=_parse_int_or_zero(row[9]),
                    fat=_parse_int_or_zero(row[10]),
                    carbs=_parse_int_or_zero(row[11]),
                ),
            )
        except ValueError as exc:
            raise ParseError(path, f"line {line_number}: {exc}") from exc
        days.append(day)
    return tuple(days)


def _read_rows(
    path: Path | str, header: tuple[str, ...]
) -> Iterator[tuple[int, list[str]]]:
    """Yield data rows after validating the header row.

    Rows are collected before yielding so the file is closed even when the
    caller stops early on a bad row.
    """
    try:
        with open(path, encoding="utf-8", newline="") as handle:
            reader = csv.reader(handle, strict=True)
            rows = [(reader.line_num, row) for row in reader if row]
    except OSError as exc:
        raise ParseError(path, f"cannot read file: {exc}") from exc
    except (UnicodeDecodeError, csv.Error) as exc:
        raise ParseError(path, f"malformed CSV: {exc}") from exc

    if not rows:
        raise ParseError(path, "missing header row")
    _, found_header = rows[0]
    _check_header(path, header, found_header)
    yield from rows[1:]


def _check_header(
    path: Path | str, expected: tuple[str, ...], found: list[str]
) -> None:
    if len(found) != len(expected):
        raise ParseError(
            path,
            f"invalid header: expected {len(expected)} columns, got {len(found)} "
            f"({found!r})",
        )
    for position, (want, got) in enumerate(zip(expected, found, strict=True)):
        if want != got:
            raise ParseError(
                path,
                f"invalid header: expected {want!r} at position {position}, "
                f"got {got!r}",
            )


def _parse_date(value: str) -> date:
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f"invalid date {value!r}") from exc


def _parse_int(value: str, field_name: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(value):
        raise ValueError(f"invalid {field_name} {value!r}")
    return int(value)


def _parse_float(value: str, field_name: str) -> float:
    if not _FLOAT_PATTERN.fullmatch(value):
        raise ValueError(f"invalid {field_name} {value!r}")
    return float(value)


def _parse_int_or_zero(value: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(value):
        return 0
    return int(value)
