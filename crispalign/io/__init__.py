"""
CrispAlign v0.1.0

Input/output adapters for CrispAlign: record readers and row writers.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .records import (
    Read,
    RawRecord,
    Record,
    RecordFilter,
    parse_record,
    parse_sample_name,
    read_records,
)
from .colorizer import Colorizer, comboize
from .writers import ConsoleWriter, CsvWriter, XlsxWriter, default_output_path, get_writer

__all__ = [
    'Read',
    'RawRecord',
    'Record',
    'RecordFilter',
    'parse_record',
    'parse_sample_name',
    'read_records',
    'Colorizer',
    'comboize',
    'ConsoleWriter',
    'CsvWriter',
    'XlsxWriter',
    'default_output_path',
    'get_writer',
]
