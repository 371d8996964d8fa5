#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Read Aligner — splice inferred ancestors into reads and pad to a fixed width.

For each group of a read (in chain order) the aligner compares the groups
that actually precede it in the read with the group's probable chain. When
the read does not contradict the probable chain, probable ancestors the read
is missing are inserted as inferred cells just before the group. Labels are
then assigned and the row is padded on its newest end, so every row stays
anchored on its chain start column.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import List, Optional, Sequence

from .cells import AlignedRow, Cell
from .chain import ChainResolver
from .frequency import FrequencyModel
from .labeler import InstanceLabeler
from ..errors import ColumnCountError
from ..io.records import Read

logger = logging.getLogger(__name__)

DEFAULT_NUMCOLS = 6


class ReadAligner:
    """
    Align reads against corpus-wide probable chains.

    The resolver and labeler caches live as long as the aligner, so one
    aligner should handle every read of a run.
    """

    def __init__(self, model: FrequencyModel, numcols: int = DEFAULT_NUMCOLS,
                 chain_start: str = 'last',
                 resolver: Optional[ChainResolver] = None,
                 labeler: Optional[InstanceLabeler] = None):
        """
        Args:
            model: Frozen corpus statistics from pass 1
            numcols: Number of group columns in every row
            chain_start: Which end of each record the chain starts at
            resolver: Chain resolver to share; built from ``model`` if None
            labeler: Instance labeler to share; built from ``model`` if None
        """
        if numcols < 1:
            raise ValueError(f"numcols must be a positive integer, got {numcols}")
        self.model = model
        self.numcols = numcols
        self.chain_start = chain_start
        self.resolver = resolver if resolver is not None else ChainResolver(model)
        self.labeler = labeler if labeler is not None else InstanceLabeler(model)

    def splice(self, chain: Sequence[str]) -> List[Cell]:
        """
        Unlabelled cells for a chain-ordered read, with inferred insertions.

        Args:
            chain: Groups of one read, chain start first

        Returns:
            Bare and inferred cells in chain order
        """
        cells: List[Cell] = []

        for i, group in enumerate(chain):
            probable = list(reversed(self.resolver.resolve(group)))
            actual = list(reversed(chain[:i]))

            if set(actual) <= set(probable):
                extension: List[Cell] = []
                present = {c.group for c in cells}
                for ancestor in probable:
                    if ancestor in actual or ancestor in present:
                        break
                    extension.append(Cell.inferred(ancestor))
                if extension:
                    logger.debug(f"Inferred {len(extension)} ancestor(s) before {group}: "
                                 f"{', '.join(c.group for c in reversed(extension))}")
                cells.extend(reversed(extension))

            cells.append(Cell.bare(group))

        return cells

    def pad(self, cells: Sequence[Cell], sample: Optional[str] = None) -> List[Cell]:
        """
        Pad labelled cells with NO_DATA up to ``numcols``.

        Raises:
            ColumnCountError: If there are more cells than columns
        """
        if len(cells) > self.numcols:
            raise ColumnCountError(len(cells), self.numcols, sample)
        return list(cells) + [Cell.no_data()] * (self.numcols - len(cells))

    def align_cells(self, read: Read) -> List[Cell]:
        """Spliced and labelled cells for ``read`` before padding."""
        return self.labeler.label_cells(self.splice(read.chain(self.chain_start)))

    def align(self, read: Read) -> AlignedRow:
        """
        Align one read into a row of exactly ``numcols`` cells.

        Raises:
            ColumnCountError: If the aligned read needs more columns
        """
        cells = self.pad(self.align_cells(read), read.sample)
        return AlignedRow(read.sample, read.count, tuple(cells), self.chain_start)


__all__ = [
    'DEFAULT_NUMCOLS',
    'ReadAligner',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
