#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Alignment Pipeline — two-pass orchestration from input file to output rows.

Pass 1 counts group and predecessor frequencies over every accepted read.
Pass 2 aligns each read against the frozen statistics. Rows are then
optionally sorted and handed to a writer.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..alignment import AlignedRow, Cell, FrequencyModel, ReadAligner, build_frequency_model, display_name
from ..errors import ColumnCountError
from ..io import (
    Colorizer,
    RawRecord,
    Read,
    Record,
    RecordFilter,
    default_output_path,
    get_writer,
    read_records,
)
from ..io.colorizer import EXCEL_COLORS
from ..io.writers import OutputRow


@dataclass
class PipelineResult:
    """
    Outcome of one alignment run.

    Attributes:
        rows: Aligned rows and passed-through raw records, in output order
        model: Frozen frequency model from pass 1
        reads_aligned: Number of reads aligned in pass 2
        reads_filtered: Number of reads rejected by the sample filters
        raw_records: Number of malformed records passed through
        cycles_detected: Predecessor cycles truncated during resolution
        output_path: File written, if any
    """
    rows: List[OutputRow]
    model: FrequencyModel
    reads_aligned: int = 0
    reads_filtered: int = 0
    raw_records: int = 0
    cycles_detected: int = 0
    output_path: Optional[Path] = None
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def frequencies(self) -> Mapping[str, int]:
        """Final group occurrence table."""
        return self.model.occurrence_table


# ============================================================================
#                           SORTING
# ============================================================================

def group_sort_key(row: AlignedRow, frequencies: Mapping[str, int]) -> Tuple[List[str], int]:
    """Chain-order normalized cell texts, then the rows' summed group frequencies."""
    texts = [display_name(c.text) if c.is_group else c.text for c in row.cells]
    total = sum(frequencies.get(c.group, 0) for c in row.cells if c.is_group)
    return texts, total


def sort_by_groups(rows: Sequence[OutputRow], frequencies: Mapping[str, int]) -> List[OutputRow]:
    """
    Order aligned rows descending by chain, then by abundance of their groups.

    Raw records keep their relative order after the aligned rows.
    """
    aligned = [r for r in rows if isinstance(r, AlignedRow)]
    raw = [r for r in rows if not isinstance(r, AlignedRow)]
    aligned.sort(key=lambda r: group_sort_key(r, frequencies), reverse=True)
    return aligned + raw


# ============================================================================
#                           PIPELINE
# ============================================================================

class AlignmentPipeline:
    """
    Coordinates record loading, both passes, sorting and output.

    Configuration keys used (see config.schema.DEFAULT_CONFIG):
    alignment.numcols, alignment.chain_start, filters.*, output.*,
    hardware.threads
    """

    def __init__(self, config: Dict[str, Any], configure_logging: bool = True):
        """
        Initialize alignment pipeline.

        Args:
            config: Pipeline configuration dictionary
            configure_logging: Install root logging handlers from config
        """
        self.config = config
        self.numcols = config['alignment']['numcols']
        self.chain_start = config['alignment']['chain_start']
        self.record_filter = RecordFilter(**(config.get('filters') or {}))
        self.threads = config.get('hardware', {}).get('threads', 1) or 1

        if configure_logging:
            self._setup_logging(config['output']['logging'])
        self.logger = logging.getLogger(__name__)

    def _setup_logging(self, logging_config: Dict[str, Any]):
        log_level = getattr(logging, str(logging_config.get('level', 'INFO')).upper())
        handlers: List[logging.Handler] = [logging.StreamHandler()]
        if logging_config.get('log_file'):
            handlers.append(logging.FileHandler(logging_config['log_file']))
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers,
        )
        logging.getLogger('crispalign').setLevel(log_level)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def load(self, input_path: Union[str, Path]) -> List[Record]:
        """Read every record of the input file."""
        records = list(read_records(input_path))
        self.logger.info(f"Loaded {len(records)} records from {input_path}")
        return records

    def accepted_reads(self, records: Sequence[Record]) -> List[Read]:
        return [r for r in records if isinstance(r, Read) and self.record_filter.accepts(r)]

    def align_records(self, records: Sequence[Record]) -> PipelineResult:
        """
        Run both passes over already-loaded records.

        Raises:
            ColumnCountError: If any aligned read needs more than numcols
                columns; names the widest requirement
        """
        reads = self.accepted_reads(records)
        n_filtered = sum(1 for r in records if isinstance(r, Read)) - len(reads)
        if n_filtered:
            self.logger.info(f"Filtered out {n_filtered} reads by sample metadata")

        # Pass 1
        self.logger.info("Pass 1: counting group frequencies")
        model = build_frequency_model(reads, chain_start=self.chain_start, threads=self.threads)

        # Pass 2
        self.logger.info("Pass 2: aligning reads")
        aligner = ReadAligner(model, numcols=self.numcols, chain_start=self.chain_start)
        aligned: Dict[int, List[Cell]] = {}
        widest: Optional[Tuple[int, str]] = None
        for i, record in enumerate(records):
            if not isinstance(record, Read) or not self.record_filter.accepts(record):
                continue
            cells = aligner.align_cells(record)
            aligned[i] = cells
            if widest is None or len(cells) > widest[0]:
                widest = (len(cells), record.sample)

        if widest is not None and widest[0] > self.numcols:
            raise ColumnCountError(widest[0], self.numcols, widest[1])

        rows: List[OutputRow] = []
        n_raw = 0
        for i, record in enumerate(records):
            if isinstance(record, RawRecord):
                rows.append(record)
                n_raw += 1
            elif i in aligned:
                cells = aligner.pad(aligned[i], record.sample)
                rows.append(AlignedRow(record.sample, record.count, tuple(cells), self.chain_start))

        if self.config['output'].get('sort') in ('group', 'groups'):
            rows = sort_by_groups(rows, model.occurrence_table)

        self.logger.info(f"Aligned {len(aligned)} reads into {self.numcols} columns "
                         f"({len(aligner.resolver)} chains resolved, "
                         f"{aligner.resolver.cycles_detected} cycles truncated)")

        return PipelineResult(
            rows=rows,
            model=model,
            reads_aligned=len(aligned),
            reads_filtered=n_filtered,
            raw_records=n_raw,
            cycles_detected=aligner.resolver.cycles_detected,
            stats={'instance_labels': len(aligner.labeler)},
        )

    def write(self, result: PipelineResult, input_path: Union[str, Path]) -> Optional[Path]:
        """Send the rows to the configured writer; returns the file written."""
        output = self.config['output']
        fmt = output.get('format', 'console')

        outfile = None
        if fmt != 'console':
            outfile = Path(output['outfile']) if output.get('outfile') else default_output_path(input_path, fmt)

        colorizer = None
        colors_path = output.get('colors')
        if fmt in ('console', 'xlsx'):
            palette = EXCEL_COLORS if fmt == 'xlsx' else None
            if colors_path:
                colorizer = Colorizer.from_file(colors_path, colors=palette)
            else:
                colorizer = Colorizer(colors=palette)

        writer = get_writer(fmt, result.frequencies, outfile=outfile,
                            colwidth=output.get('colwidth', 15), colorizer=colorizer)
        writer.write(result.rows)

        if colorizer is not None and colors_path and not colorizer.pinned:
            self.logger.info("Writing colorfile...")
            colorizer.save(colors_path)

        result.output_path = outfile
        return outfile

    def run(self, input_path: Union[str, Path], write: bool = True) -> PipelineResult:
        """
        Load, align and (optionally) write one input file.

        Args:
            input_path: Path to the ``.csv`` or TAB-delimited input
            write: Send rows to the configured writer
        """
        records = self.load(input_path)
        result = self.align_records(records)
        if write:
            self.write(result, input_path)
        return result


__all__ = [
    'PipelineResult',
    'group_sort_key',
    'sort_by_groups',
    'AlignmentPipeline',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
