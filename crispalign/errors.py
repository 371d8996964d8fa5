#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Exception hierarchy shared by the alignment core, I/O adapters and CLI.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Optional, Sequence


class CrispAlignError(Exception):
    """Base class for all CrispAlign errors."""
    pass


class ConfigurationError(CrispAlignError):
    """Raised when the run configuration cannot produce valid output."""
    pass


class ColumnCountError(ConfigurationError):
    """
    Raised when an aligned read needs more columns than configured.
    
    Attributes:
        required: Minimum column count that would fit the read
        numcols: Configured column count
        sample: Sample identifier of the widest offending read (if known)
    """
    
    def __init__(self, required: int, numcols: int, sample: Optional[str] = None):
        self.required = required
        self.numcols = numcols
        self.sample = sample
        where = f" (sample {sample})" if sample else ""
        super().__init__(
            f"Not enough columns: aligned read{where} needs {required} "
            f"but numcols is {numcols}. Use --numcols {required} or higher."
        )


class MalformedRecordError(CrispAlignError):
    """
    Raised when an input record has no parseable groups or count.
    
    The offending fields are kept so the record can be passed through
    to the output unchanged.
    """
    
    def __init__(self, message: str, fields: Sequence[str] = ()):
        self.fields = list(fields)
        super().__init__(message)


__all__ = [
    'CrispAlignError',
    'ConfigurationError',
    'ColumnCountError',
    'MalformedRecordError',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
