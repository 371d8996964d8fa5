#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Row writers — console table, CSV export and Excel workbook of aligned rows.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import csv
import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import click
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from ..alignment.cells import CHAIN_START_TEXT, AlignedRow, Cell, CellKind
from .colorizer import EXCEL_COLORS, EXCEL_RGB, Colorizer
from .records import RawRecord

logger = logging.getLogger(__name__)

OutputRow = Union[AlignedRow, RawRecord]

SAMPLE_WIDTH = 20
COUNT_WIDTH = 10


def default_output_path(input_path: Union[str, Path], fmt: str) -> Path:
    """``<input dir>/<input stem>.aligned.<fmt>``."""
    input_path = Path(input_path)
    return input_path.parent / f"{input_path.stem}.aligned.{fmt}"


def is_interior_gap(following: Sequence[Cell]) -> bool:
    """True if an observed group comes after an inferred cell in display order."""
    return any(c.kind is not CellKind.INFERRED and c.kind is not CellKind.NO_DATA
               for c in following)


# ============================================================================
#                           CONSOLE OUTPUT
# ============================================================================

class ConsoleWriter:
    """
    Fixed-width, colorized table on stdout.

    Unique groups print plain. Repeated groups are colored by base group.
    Inferred cells show a colored ``*`` only for interior gaps, i.e. when
    an observed group follows them in display order.
    """

    def __init__(self, frequencies: Mapping[str, int], colwidth: int = 15,
                 colorizer: Optional[Colorizer] = None,
                 echo: Callable[[str], None] = click.echo):
        self.frequencies = frequencies
        self.colwidth = colwidth
        self.colorizer = colorizer or Colorizer()
        self.echo = echo

    def format_cell(self, cell: Cell, following: Sequence[Cell]) -> str:
        width = self.colwidth
        if cell.kind is CellKind.NO_DATA:
            return ''.center(width)
        if cell.kind is CellKind.CHAIN_START:
            return CHAIN_START_TEXT.center(width)
        if cell.kind is CellKind.INFERRED:
            text = '*' if is_interior_gap(following) else ''
            return self.colorizer.colorize(text.center(width), key=cell.label)
        if self.frequencies.get(cell.group, 0) == 1:
            return cell.label.ljust(width)
        return self.colorizer.colorize(cell.label.ljust(width), key=cell.label)

    def format_row(self, row: AlignedRow) -> str:
        cells = row.display_cells()
        parts = [row.sample.ljust(SAMPLE_WIDTH), str(row.count).ljust(COUNT_WIDTH)]
        for i, cell in enumerate(cells):
            parts.append(self.format_cell(cell, cells[i + 1:]))
        return ''.join(parts)

    def write(self, rows: Iterable[OutputRow]):
        n = 0
        for row in rows:
            if isinstance(row, RawRecord):
                self.echo(row.line if row.line is not None else '\t'.join(row.fields))
            else:
                self.echo(self.format_row(row))
            n += 1
        logger.info(f"Printed {n} rows")


# ============================================================================
#                           CSV OUTPUT
# ============================================================================

class CsvWriter:
    """Write ``[sample, count, cells...]`` rows; raw records pass through."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, rows: Iterable[OutputRow]):
        n = 0
        with open(self.path, 'w', newline='') as f:
            writer = csv.writer(f)
            for row in rows:
                fields: List = row.to_row()
                if not any(str(x).strip() for x in fields):
                    continue
                writer.writerow(fields)
                n += 1
        logger.info(f"Wrote {n} rows to {self.path}")


# ============================================================================
#                           EXCEL OUTPUT
# ============================================================================

class XlsxWriter:
    """
    Excel workbook with a ``sample, count`` header row.

    Cells follow the console rules: padding is blank, inferred cells hold
    ``*`` for interior gaps and are blank otherwise, the chain start is
    ``-``. Repeated groups get a font color and, for two-color combos, a
    solid background fill.
    """

    HEADER = ['sample', 'count']

    def __init__(self, path: Union[str, Path], frequencies: Mapping[str, int],
                 colorizer: Optional[Colorizer] = None):
        self.path = Path(path)
        self.frequencies = frequencies
        self.colorizer = colorizer or Colorizer(colors=EXCEL_COLORS)
        self._styles: Dict[Tuple[str, ...], Tuple[Optional[Font], Optional[PatternFill]]] = {}

    def style_for(self, combo: Sequence[str]) -> Tuple[Optional[Font], Optional[PatternFill]]:
        """Font and fill for a color combo; unknown color names are skipped."""
        key = tuple(combo)
        if key not in self._styles:
            fg = EXCEL_RGB.get(combo[0])
            bg = EXCEL_RGB.get(combo[1]) if len(combo) > 1 else None
            font = Font(color=fg) if fg else None
            fill = PatternFill(fill_type='solid', fgColor=bg) if bg else None
            self._styles[key] = (font, fill)
        return self._styles[key]

    def cell_value(self, cell: Cell, following: Sequence[Cell]) -> Tuple[str, Optional[List[str]]]:
        """Sheet text and color combo (None for uncolored) of one cell."""
        if cell.kind is CellKind.NO_DATA:
            return '', None
        if cell.kind is CellKind.CHAIN_START:
            return CHAIN_START_TEXT, None
        if cell.kind is CellKind.INFERRED:
            text = '*' if is_interior_gap(following) else ''
            return text, self.colorizer.combo_for(cell.label)
        if self.frequencies.get(cell.group, 0) == 1:
            return cell.label, None
        return cell.label, self.colorizer.combo_for(cell.label)

    def write(self, rows: Iterable[OutputRow]):
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = 'aligned'
        sheet.append(self.HEADER)

        n = 0
        for row in rows:
            if isinstance(row, RawRecord):
                if any(f.strip() for f in row.fields):
                    sheet.append(list(row.fields))
                    n += 1
                continue

            cells = row.display_cells()
            values = []
            combos = []
            for i, cell in enumerate(cells):
                text, combo = self.cell_value(cell, cells[i + 1:])
                values.append(text)
                combos.append(combo)
            sheet.append([row.sample, row.count] + values)

            # group columns start after sample and count
            for col, combo in enumerate(combos, start=len(self.HEADER) + 1):
                if not combo:
                    continue
                font, fill = self.style_for(combo)
                target = sheet.cell(row=sheet.max_row, column=col)
                if font is not None:
                    target.font = font
                if fill is not None:
                    target.fill = fill
            n += 1

        workbook.save(self.path)
        logger.info(f"Wrote {n} rows to {self.path}")


def get_writer(fmt: str, frequencies: Mapping[str, int],
               outfile: Optional[Union[str, Path]] = None,
               colwidth: int = 15, colorizer: Optional[Colorizer] = None):
    """
    Writer for an output format.

    Args:
        fmt: 'console', 'csv' or 'xlsx'
        frequencies: Group occurrence table used for coloring decisions
        outfile: Destination path (required for 'csv' and 'xlsx')
        colwidth: Console column width
        colorizer: Shared colorizer for console and xlsx output

    Raises:
        ValueError: Unsupported format or missing outfile
    """
    if fmt == 'console':
        return ConsoleWriter(frequencies, colwidth=colwidth, colorizer=colorizer)
    if fmt in ('csv', 'xlsx') and outfile is None:
        raise ValueError(f"{fmt.upper()} output requires an output path")
    if fmt == 'csv':
        return CsvWriter(outfile)
    if fmt == 'xlsx':
        return XlsxWriter(outfile, frequencies, colorizer=colorizer)
    raise ValueError(f"Unsupported output format: {fmt}")


__all__ = [
    'OutputRow',
    'default_output_path',
    'is_interior_gap',
    'ConsoleWriter',
    'CsvWriter',
    'XlsxWriter',
    'get_writer',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
