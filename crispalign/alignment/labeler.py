#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Instance Labeler — stable display labels for repeated groups.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Dict, Iterable, List, Optional

from .cells import CHAIN_START, CHAIN_START_TEXT, Cell, display_name
from .frequency import FrequencyModel


class InstanceLabeler:
    """
    Assign ``<group>-<n>`` labels keyed by (group, preceding label).

    Groups that occur once in the corpus keep their plain name. For the
    others, every distinct preceding label gets the next ordinal, so the
    same context always maps to the same label for the rest of the run.
    """

    def __init__(self, model: FrequencyModel):
        self.model = model
        self.instances: Dict[str, Dict[str, str]] = {}

    def label_for(self, group: str, previous_label: Optional[str] = None) -> str:
        """
        Display label for ``group`` following ``previous_label``.

        Args:
            group: Raw group identifier
            previous_label: Label of the immediately preceding cell, None at
                the chain start
        """
        name = display_name(group)
        if name == CHAIN_START_TEXT or self.model.is_unique(name):
            return name

        context = display_name(previous_label) if previous_label else CHAIN_START
        seen = self.instances.setdefault(name, {})
        if context not in seen:
            seen[context] = f"{name}-{len(seen) + 1}"
        return seen[context]

    def label_cells(self, cells: Iterable[Cell]) -> List[Cell]:
        """Label group cells left to right, chaining each label into the next."""
        labelled: List[Cell] = []
        previous: Optional[str] = None
        for cell in cells:
            if cell.is_group:
                cell = cell.with_label(self.label_for(cell.group, previous))
            labelled.append(cell)
            previous = cell.label or None
        return labelled

    def __len__(self) -> int:
        return sum(len(v) for v in self.instances.values())


__all__ = ['InstanceLabeler']

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
