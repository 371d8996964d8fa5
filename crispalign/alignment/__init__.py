"""
CrispAlign v0.1.0

Alignment core for CrispAlign.

This module provides the two-pass alignment engine:
- Frequency model (pass 1): group occurrences and predecessor statistics
- Chain resolution: most probable ancestor chain per group
- Read alignment (pass 2): inferred-ancestor splicing and fixed-width rows
- Instance labelling: stable labels for repeated groups

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .cells import (
    CHAIN_START,
    CHAIN_START_TEXT,
    NO_DATA_TEXT,
    display_name,
    CellKind,
    Cell,
    AlignedRow,
)
from .frequency import FrequencyCounter, FrequencyModel, build_frequency_model
from .chain import Chain, ChainResolver, best_predecessor, resolve_all
from .labeler import InstanceLabeler
from .aligner import DEFAULT_NUMCOLS, ReadAligner

__all__ = [
    # Cells
    'CHAIN_START',
    'CHAIN_START_TEXT',
    'NO_DATA_TEXT',
    'display_name',
    'CellKind',
    'Cell',
    'AlignedRow',
    # Pass 1
    'FrequencyCounter',
    'FrequencyModel',
    'build_frequency_model',
    # Chains
    'Chain',
    'ChainResolver',
    'best_predecessor',
    'resolve_all',
    # Pass 2
    'InstanceLabeler',
    'DEFAULT_NUMCOLS',
    'ReadAligner',
]
