#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Record I/O for CrispAlign.

Consolidated module containing:
- Read and RawRecord data structures
- Sample name metadata parsing (locus, ratio, timepoint)
- Record filtering
- CSV and TAB-delimited record readers

Input is one read per line, either

    sample<TAB>count<TAB>group1:group2:...:groupN

or, for files ending in ``.csv``,

    sample,count,group1,group2,...,groupN
"""

# =============================================================================
# SECTION 1: IMPORTS AND DEPENDENCIES
# =============================================================================

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from ..errors import MalformedRecordError

logger = logging.getLogger(__name__)

SAMPLE_NAME_PATTERN = re.compile(r'CR_(\d+)_MOI(\d+)_tp_(\d+)')

CHAIN_START_POSITIONS = ('first', 'last')


# =============================================================================
# SECTION 2: RECORD DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class Read:
    """
    One observed sequence of groups.

    Attributes:
        sample: Sample identifier
        count: Abundance of this read (>= 1)
        groups: Groups in record order, as written in the input
        locus: Locus number parsed from the sample name
        ratio: MOI ratio parsed from the sample name
        timepoint: Timepoint parsed from the sample name
    """
    sample: str
    count: int
    groups: Tuple[str, ...]
    locus: Optional[int] = None
    ratio: Optional[int] = None
    timepoint: Optional[int] = None

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"Read count must be >= 1, got {self.count}")

    def chain(self, chain_start: str = 'last') -> Tuple[str, ...]:
        """
        Groups in chain order (chain start first).

        Args:
            chain_start: 'last' if the visually last group is the chain start,
                'first' if the record is already in chain order
        """
        if chain_start not in CHAIN_START_POSITIONS:
            raise ValueError(f"chain_start must be one of {CHAIN_START_POSITIONS}, got {chain_start!r}")
        if chain_start == 'last':
            return tuple(reversed(self.groups))
        return self.groups


@dataclass(frozen=True)
class RawRecord:
    """
    Unparseable input record carried through to the output unchanged.

    Attributes:
        fields: Fields as split by the reader
        reason: Why the record could not be parsed
        line: Input line text without its line ending
    """
    fields: Tuple[str, ...]
    reason: str = ''
    line: Optional[str] = None

    def to_row(self) -> List[str]:
        return list(self.fields)


Record = Union[Read, RawRecord]


# =============================================================================
# SECTION 3: PARSING AND FILTERING
# =============================================================================

def parse_sample_name(sample: str) -> Tuple[Optional[int], Optional[int], Optional[int]]:
    """
    Extract (locus, ratio, timepoint) from a ``CR_<L>_MOI<R>_tp_<T>`` name.

    Returns a tuple of Nones when the name does not follow the pattern.
    """
    match = SAMPLE_NAME_PATTERN.search(sample or '')
    if not match:
        return None, None, None
    locus, ratio, timepoint = (int(value) for value in match.groups())
    return locus, ratio, timepoint


def parse_record(fields: Sequence[str]) -> Read:
    """
    Build a Read from ``[sample, count, group, ...]`` fields.

    Raises:
        MalformedRecordError: If the count is not a positive integer or
            there are no groups
    """
    fields = [f.strip() if f is not None else '' for f in fields]
    if len(fields) < 2 or not fields[0]:
        raise MalformedRecordError("Record has no sample or count", fields)

    sample, count_str = fields[0], fields[1]
    try:
        count = int(count_str)
    except ValueError:
        raise MalformedRecordError(f"Invalid count {count_str!r} for sample {sample}", fields)
    if count < 1:
        raise MalformedRecordError(f"Count must be positive for sample {sample}, got {count}", fields)

    groups = tuple(g for g in fields[2:] if g)
    if not groups:
        raise MalformedRecordError(f"No groups for sample {sample}", fields)

    locus, ratio, timepoint = parse_sample_name(sample)
    return Read(sample, count, groups, locus=locus, ratio=ratio, timepoint=timepoint)


@dataclass(frozen=True)
class RecordFilter:
    """
    Equality filters on sample metadata.

    A filter left as None accepts everything; a set filter rejects reads
    whose sample name carries no value for that field.
    """
    locus: Optional[int] = None
    ratio: Optional[int] = None
    timepoint: Optional[int] = None

    def accepts(self, read: Read) -> bool:
        for wanted, actual in ((self.locus, read.locus),
                               (self.ratio, read.ratio),
                               (self.timepoint, read.timepoint)):
            if wanted is not None and actual != wanted:
                return False
        return True

    @property
    def active(self) -> bool:
        return any(v is not None for v in (self.locus, self.ratio, self.timepoint))


# =============================================================================
# SECTION 4: FILE READERS
# =============================================================================

def _split_tab_line(line: str) -> List[str]:
    """Split a TAB-delimited line; group columns are further split on ':'."""
    columns = [col.strip() for col in line.rstrip('\r\n').split('\t')]
    fields = columns[:2]
    for col in columns[2:]:
        fields.extend(col.split(':'))
    return fields


def _split_csv_line(line: str) -> List[str]:
    return next(csv.reader([line]), [])


def iter_lines(filepath: Union[str, Path]) -> Iterator[Tuple[str, List[str]]]:
    """
    Yield ``(line text, fields)`` for each non-blank line.

    Files ending in ``.csv`` are split with the csv module; everything else
    is treated as TAB-delimited. Line text has its line ending removed.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    split = _split_csv_line if filepath.suffix.lower() == '.csv' else _split_tab_line
    with open(filepath, 'r', newline='') as handle:
        for line in handle:
            text = line.rstrip('\r\n')
            fields = split(text)
            if any(f.strip() for f in fields):
                yield text, fields


def iter_fields(filepath: Union[str, Path]) -> Iterator[List[str]]:
    """Yield the raw fields of each non-blank line."""
    for _, fields in iter_lines(filepath):
        yield fields


def read_records(filepath: Union[str, Path]) -> Iterator[Record]:
    """
    Yield a Read for every parseable line and a RawRecord for the rest.

    Args:
        filepath: Path to a ``.csv`` or TAB-delimited input file
    """
    for lineno, (text, fields) in enumerate(iter_lines(filepath), start=1):
        try:
            yield parse_record(fields)
        except MalformedRecordError as e:
            logger.debug(f"Line {lineno}: passing through malformed record: {e}")
            yield RawRecord(tuple(fields), reason=str(e), line=text)


__all__ = [
    'SAMPLE_NAME_PATTERN',
    'CHAIN_START_POSITIONS',
    'Read',
    'RawRecord',
    'Record',
    'parse_sample_name',
    'parse_record',
    'RecordFilter',
    'iter_lines',
    'iter_fields',
    'read_records',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
