"""
Turns rows of cell strings into typed observations.

Each table gets a Scheme: how wide a data row must be, how many leading header rows to skip, which
    column identifies the row and a map from column position -> (metric, decode rule).
The rules are plain data so the catalog in metrics.py can be read (and tested) without running
    anything; decode_table() is the only place that interprets them.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import NamedTuple

import structlog
from err.exceptions import CellDecodeError
from tc4400.parse import Table

log = structlog.get_logger(__name__)

# strconv.ParseInt/ParseFloat style; int()/float() would also take '1_000', ' 7', 'inf' ... etc
_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

COUNTER = "counter"
GAUGE = "gauge"


@dataclass(frozen=True)
class MetricDesc:
    """Identity of a published metric"""

    name: str
    documentation: str
    kind: str = GAUGE
    labelnames: tuple[str, ...] = ()


##
# Decode rules
##
@dataclass(frozen=True)
class DirectInt:
    """'1234' -> 1234"""


@dataclass(frozen=True)
class StatusEquals:
    """1 if the cell reads exactly `expected`, else 0. Never fails."""

    expected: str


@dataclass(frozen=True)
class CategoricalLabel:
    """Cell text becomes an extra label; value is always 1. Never fails."""


@dataclass(frozen=True)
class UnitInt:
    """'1000 kHz' -> 1000 * units['kHz']"""

    units: Mapping[str, int]


@dataclass(frozen=True)
class UnitFloat:
    """'3.5 dBmV' -> 3.5, as long as the unit matches"""

    unit: str


DecodeRule = DirectInt | StatusEquals | CategoricalLabel | UnitInt | UnitFloat


##
# Row key rules
##
@dataclass(frozen=True)
class RowKey:
    """Integer column rendered as a zero padded label: '1' -> '01'"""

    width: int = 2


@dataclass(frozen=True)
class RawKey:
    """Cell text is used as-is for the label"""


KeyRule = RowKey | RawKey


@dataclass(frozen=True)
class ColumnRule:
    metric: MetricDesc
    rule: DecodeRule


@dataclass(frozen=True)
class Scheme:
    """How to decode one kind of table"""

    # Rows that are not exactly this wide are header/separator rows and get skipped
    row_length: int
    key_column: int
    key_rule: KeyRule
    columns: Mapping[int, ColumnRule]
    # Header + sub-header rows at the top of every TC4400 table
    skip_rows: int = 2
    # Fewer rows than this means the page didn't render the table
    min_rows: int = 2

    def __post_init__(self):
        for idx in (self.key_column, *self.columns):
            if not 0 <= idx < self.row_length:
                raise ValueError(f"Column {idx} out of range for row length {self.row_length}")


@dataclass(frozen=True)
class PageSpec:
    """A page on the modem and the schemes for the tables on it, keyed by table position"""

    name: str
    tables: Mapping[int, Scheme]

    @property
    def min_tables(self) -> int:
        return max(self.tables) + 1 if self.tables else 0


class Observation(NamedTuple):
    metric: MetricDesc
    labels: tuple[str, ...]
    value: float


@dataclass
class DecodeResult:
    observations: list[Observation] = field(default_factory=list)
    failures: int = 0


def parse_int(text: str) -> int:
    if not _INT_RE.match(text):
        raise CellDecodeError(f"Not an integer: {text!r}", text)
    return int(text)


def parse_float(text: str) -> float:
    if not _FLOAT_RE.match(text):
        raise CellDecodeError(f"Not a number: {text!r}", text)
    return float(text)


def _split_unit(cell: str) -> tuple[str, str]:
    # Exactly '<number> <unit>'; anything else is not something we know how to read
    tokens = cell.split(" ")
    if len(tokens) != 2:
        raise CellDecodeError(f"Expected '<value> <unit>', got {cell!r}", cell)
    return tokens[0], tokens[1]


def decode_cell(rule: DecodeRule, cell: str) -> tuple[float, tuple[str, ...]]:
    """Returns the value and any extra label values for the cell.

    Raises:
        CellDecodeError: cell text doesn't fit the rule
    """
    if isinstance(rule, DirectInt):
        return float(parse_int(cell)), ()
    if isinstance(rule, StatusEquals):
        return (1.0 if cell == rule.expected else 0.0), ()
    if isinstance(rule, CategoricalLabel):
        return 1.0, (cell,)
    if isinstance(rule, UnitInt):
        number, unit = _split_unit(cell)
        if unit not in rule.units:
            raise CellDecodeError(f"Unknown unit {unit!r} in {cell!r}", cell)
        return float(parse_int(number) * rule.units[unit]), ()
    if isinstance(rule, UnitFloat):
        number, unit = _split_unit(cell)
        if unit != rule.unit:
            raise CellDecodeError(f"Expected unit {rule.unit!r}, got {cell!r}", cell)
        return parse_float(number), ()
    raise TypeError(f"Unsupported decode rule {rule!r}")


def decode_key(rule: KeyRule, cell: str) -> str:
    if isinstance(rule, RowKey):
        return f"{parse_int(cell):0{rule.width}d}"
    if isinstance(rule, RawKey):
        return cell
    raise TypeError(f"Unsupported key rule {rule!r}")


def decode_table(table: Table, scheme: Scheme) -> DecodeResult:
    """Decode every data row of the table.

    A bad cell only costs that one observation. A bad row key costs the whole row since every
        observation from the row needs it as a label. Either way, result.failures goes up by one
        and we keep going.
    """
    result = DecodeResult()
    columns = sorted(scheme.columns.items())

    for row_idx, row in enumerate(table[scheme.skip_rows :], start=scheme.skip_rows):
        if len(row) != scheme.row_length:
            log.debug(
                "Skipping row with unexpected number of columns",
                row_idx=row_idx,
                expected=scheme.row_length,
                got=len(row),
            )
            continue

        try:
            key = decode_key(scheme.key_rule, row[scheme.key_column])
        except CellDecodeError as e:
            log.error("Failed to decode row key; dropping row", row_idx=row_idx, error=e)
            result.failures += 1
            continue

        for col_idx, column in columns:
            try:
                value, extra_labels = decode_cell(column.rule, row[col_idx])
            except CellDecodeError as e:
                log.error(
                    "Failure to convert raw value into correct value for metric.",
                    row_idx=row_idx,
                    col_idx=col_idx,
                    metric=column.metric.name,
                    error=e,
                )
                result.failures += 1
                continue
            result.observations.append(
                Observation(column.metric, (key, *extra_labels), value)
            )

    return result
