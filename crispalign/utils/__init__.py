"""
CrispAlign v0.1.0

Utilities module for CrispAlign.

This module provides:
- Pipeline orchestration (two-pass alignment from input file to output)
- Row sorting by chain and abundance
"""

from .pipeline import (
    AlignmentPipeline,
    PipelineResult,
    group_sort_key,
    sort_by_groups,
)

__all__ = [
    'AlignmentPipeline',
    'PipelineResult',
    'group_sort_key',
    'sort_by_groups',
]
