#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Aligned row cells — tagged cell variants and the fixed-width AlignedRow.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Tuple, Union

# Sentinel predecessor for the first group of a chain
CHAIN_START = ''

CHAIN_START_TEXT = '-'
NO_DATA_TEXT = '*'

_INFERRED_MARKER = re.compile(r'\((.*?)\)')


def display_name(token: str) -> str:
    """
    Normalize a raw token for display.

    Strips inferred-marker parentheses and surrounding whitespace. An empty
    result becomes the chain-start dash.

    Example:
        >>> display_name(' (spacer_4) ')
        'spacer_4'
    """
    name = _INFERRED_MARKER.sub(r'\1', token or '').strip()
    return name or CHAIN_START_TEXT


class CellKind(Enum):
    """What an aligned cell holds."""
    BARE = "bare"
    INFERRED = "inferred"
    CHAIN_START = "chain_start"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class Cell:
    """
    One column of an aligned row.

    Attributes:
        kind: Cell variant
        group: Underlying group identifier (empty for NO_DATA)
        label: Display label assigned by the InstanceLabeler
    """
    kind: CellKind
    group: str = ''
    label: str = ''

    @classmethod
    def bare(cls, group: str) -> 'Cell':
        return cls(CellKind.BARE, group)

    @classmethod
    def inferred(cls, group: str) -> 'Cell':
        return cls(CellKind.INFERRED, group)

    @classmethod
    def no_data(cls) -> 'Cell':
        return cls(CellKind.NO_DATA)

    @property
    def is_group(self) -> bool:
        return self.kind in (CellKind.BARE, CellKind.INFERRED)

    def with_label(self, label: str) -> 'Cell':
        """Return a labelled copy; a dash label marks the chain start."""
        if label == CHAIN_START_TEXT and self.kind is CellKind.BARE:
            return replace(self, kind=CellKind.CHAIN_START, label=label)
        return replace(self, label=label)

    @property
    def text(self) -> str:
        """Plain-text rendering used by the CSV writer and for sorting."""
        if self.kind is CellKind.NO_DATA:
            return NO_DATA_TEXT
        if self.kind is CellKind.CHAIN_START:
            return CHAIN_START_TEXT
        label = self.label or display_name(self.group)
        if self.kind is CellKind.INFERRED:
            return f"({label})"
        return label


@dataclass(frozen=True)
class AlignedRow:
    """
    Fixed-width aligned output for one read.

    ``cells`` are kept in chain order (chain start first). Display order
    depends on which end of the record the chain starts at.
    """
    sample: str
    count: int
    cells: Tuple[Cell, ...]
    chain_start: str = 'last'

    def __len__(self) -> int:
        return len(self.cells)

    def display_cells(self) -> List[Cell]:
        """Cells in the order they are written out."""
        if self.chain_start == 'last':
            return list(reversed(self.cells))
        return list(self.cells)

    def to_row(self) -> List[Union[str, int]]:
        """``[sample, count, cell_1 ... cell_numcols]`` in display order."""
        return [self.sample, self.count] + [c.text for c in self.display_cells()]


__all__ = [
    'CHAIN_START',
    'CHAIN_START_TEXT',
    'NO_DATA_TEXT',
    'display_name',
    'CellKind',
    'Cell',
    'AlignedRow',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
