#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Tests for output writers and the group colorizer.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import csv
import json
from pathlib import Path

import click
import pytest
from openpyxl import load_workbook

from crispalign.alignment import AlignedRow, Cell, CellKind
from crispalign.io import (
    Colorizer,
    ConsoleWriter,
    CsvWriter,
    RawRecord,
    XlsxWriter,
    comboize,
    default_output_path,
    get_writer,
)
from crispalign.io.colorizer import COLORS, EXCEL_COLORS, color_key

ANSI = '\x1b['


def row(*cells, sample='s1', count=3):
    return AlignedRow(sample, count, tuple(cells), chain_start='first')


# ═══════════════════════════════════════════════════════════════════════
#  Colorizer
# ═══════════════════════════════════════════════════════════════════════

class TestColorizer:
    """Color combination assignment."""

    def test_combo_rules(self):
        combos = comboize(COLORS)

        assert len(combos) == 45
        assert ['black'] not in combos
        assert ['white'] not in combos
        assert ['yellow', 'white'] not in combos
        assert ['red', 'magenta'] not in combos
        assert all(c[0] != 'white' for c in combos)
        assert all(len(c) == 1 or c[1] != 'black' for c in combos)

    def test_color_key_strips_instance_and_marker(self):
        assert color_key('(group_7-2)') == 'group_7'
        assert color_key('group_7-11') == 'group_7'
        assert color_key('group_7') == 'group_7'

    def test_instances_share_color(self):
        colorizer = Colorizer()

        assert colorizer.combo_for('G-1') == colorizer.combo_for('G-2')
        assert colorizer.combo_for('(G-1)') == colorizer.combo_for('G')
        assert colorizer.combo_for('H') != colorizer.combo_for('G')

    def test_colorize_uses_click_style(self):
        colorizer = Colorizer(colormap={'A': ['red']})

        assert colorizer.colorize('A') == click.style('A', fg='red')
        assert colorizer.colorize('text', key='A-3') == click.style('text', fg='red')

    def test_exhausted_combos_leave_text_plain(self):
        colorizer = Colorizer(colormap={'A': ['red']})

        assert colorizer.colorize('B') == 'B'

    def test_save_and_reload(self, temp_output_dir):
        path = temp_output_dir / "colors.json"
        colorizer = Colorizer()
        combo = colorizer.combo_for('G-1')
        colorizer.save(path)

        reloaded = Colorizer.from_file(path)

        assert json.loads(path.read_text()) == {'G': combo}
        assert reloaded.pinned
        assert reloaded.combo_for('G-4') == combo

    def test_missing_or_bad_colormap_starts_fresh(self, temp_output_dir):
        bad = temp_output_dir / "bad.json"
        bad.write_text("{not json")
        not_a_map = temp_output_dir / "list.json"
        not_a_map.write_text(json.dumps(["red"]))
        bad_values = temp_output_dir / "values.json"
        bad_values.write_text(json.dumps({"G": "red"}))

        assert not Colorizer.from_file(temp_output_dir / "missing.json").pinned
        assert not Colorizer.from_file(bad).pinned
        assert not Colorizer.from_file(not_a_map).pinned
        assert not Colorizer.from_file(bad_values).pinned

    def test_fresh_colorizer_uses_requested_palette(self, temp_output_dir):
        colorizer = Colorizer.from_file(temp_output_dir / "missing.json", colors=EXCEL_COLORS)

        assert colorizer.colors == EXCEL_COLORS
        assert len(colorizer.combos) > len(comboize(COLORS))
        assert ['cyan', 'lime'] not in colorizer.combos


# ═══════════════════════════════════════════════════════════════════════
#  Console output
# ═══════════════════════════════════════════════════════════════════════

class TestConsoleWriter:
    """Fixed-width colored table."""

    def render(self, aligned, frequencies):
        lines = []
        ConsoleWriter(frequencies, colwidth=8, echo=lines.append).write([aligned])
        return lines[0]

    def test_unique_group_plain(self):
        line = self.render(row(Cell(CellKind.BARE, 'U', 'U')), {'U': 1})

        assert ANSI not in line
        assert line.startswith('s1'.ljust(20) + '3'.ljust(10))
        assert 'U'.ljust(8) in line

    def test_repeated_group_colored(self):
        line = self.render(row(Cell(CellKind.BARE, 'G', 'G-1')), {'G': 4})

        assert ANSI in line
        assert 'G-1' in line

    def test_interior_inferred_gap_starred(self):
        aligned = row(Cell(CellKind.INFERRED, 'X', 'X-1'), Cell(CellKind.BARE, 'B', 'B'))

        assert '*' in self.render(aligned, {'X': 2, 'B': 1})

    def test_trailing_inferred_blank(self):
        aligned = row(Cell(CellKind.BARE, 'B', 'B'), Cell(CellKind.INFERRED, 'X', 'X-1'))

        line = self.render(aligned, {'X': 2, 'B': 1})

        assert '*' not in line
        assert 'X-1' not in line

    def test_no_data_and_chain_start(self):
        aligned = row(Cell(CellKind.CHAIN_START, '', '-'), Cell.no_data())

        line = self.render(aligned, {})

        assert line.endswith('-'.center(8) + ''.center(8))

    def test_raw_record_passthrough(self):
        lines = []
        ConsoleWriter({}, echo=lines.append).write([RawRecord(('header', 'count'))])

        assert lines == ['header\tcount']

    def test_raw_record_keeps_input_line(self):
        lines = []
        raw = RawRecord(('s', 'x', 'A', 'B'), line='s\tx\tA:B')

        ConsoleWriter({}, echo=lines.append).write([raw])

        assert lines == ['s\tx\tA:B']


# ═══════════════════════════════════════════════════════════════════════
#  CSV output
# ═══════════════════════════════════════════════════════════════════════

class TestCsvWriter:
    """CSV export."""

    def test_rows_and_passthrough(self, temp_output_dir):
        path = temp_output_dir / "out.csv"
        aligned = row(Cell(CellKind.INFERRED, 'Z', 'Z'), Cell(CellKind.BARE, 'F', 'F-1'), Cell.no_data())

        CsvWriter(path).write([aligned, RawRecord(('header', 'count', 'x')), RawRecord(('', ''))])

        with open(path, newline='') as f:
            rows = list(csv.reader(f))
        assert rows == [['s1', '3', '(Z)', 'F-1', '*'], ['header', 'count', 'x']]


# ═══════════════════════════════════════════════════════════════════════
#  Excel output
# ═══════════════════════════════════════════════════════════════════════

class TestXlsxWriter:
    """Colored Excel workbook."""

    def write_and_load(self, path, rows, frequencies, colormap):
        XlsxWriter(path, frequencies, colorizer=Colorizer(colormap=colormap)).write(rows)
        return load_workbook(path).active

    def test_round_trip(self, temp_output_dir):
        path = temp_output_dir / "out.xlsx"
        aligned = row(
            Cell(CellKind.INFERRED, 'X', 'X-1'),
            Cell(CellKind.BARE, 'B', 'B'),
            Cell(CellKind.BARE, 'G', 'G-1'),
            Cell.no_data(),
        )
        frequencies = {'X': 2, 'B': 1, 'G': 3}
        colormap = {'X': ['red', 'white'], 'G': ['blue']}

        sheet = self.write_and_load(path, [aligned, RawRecord(('header', 'count', 'x'))],
                                    frequencies, colormap)

        assert [c.value for c in sheet[1]][:2] == ['sample', 'count']
        assert [c.value for c in sheet[2]][:5] == ['s1', 3, '*', 'B', 'G-1']
        assert sheet.cell(row=2, column=6).value in (None, '')
        assert [c.value for c in sheet[3]][:3] == ['header', 'count', 'x']

        inferred = sheet.cell(row=2, column=3)
        assert inferred.font.color.rgb == 'FFFF0000'
        assert inferred.fill.fill_type == 'solid'
        assert inferred.fill.fgColor.rgb == 'FFFFFFFF'

        repeated = sheet.cell(row=2, column=5)
        assert repeated.font.color.rgb == 'FF0000FF'
        assert repeated.fill.fill_type is None

        assert sheet.cell(row=2, column=4).fill.fill_type is None

    def test_trailing_inferred_and_chain_start(self, temp_output_dir):
        path = temp_output_dir / "out.xlsx"
        aligned = row(
            Cell(CellKind.CHAIN_START, '', '-'),
            Cell(CellKind.BARE, 'B', 'B'),
            Cell(CellKind.INFERRED, 'X', 'X-1'),
        )

        sheet = self.write_and_load(path, [aligned], {'X': 2, 'B': 1}, {'X': ['red']})

        assert sheet.cell(row=2, column=3).value == '-'
        assert sheet.cell(row=2, column=5).value in (None, '')

    def test_chain_start_last_display_order(self, temp_output_dir):
        path = temp_output_dir / "out.xlsx"
        aligned = AlignedRow('s1', 1, (Cell(CellKind.BARE, 'A', 'A'), Cell.no_data()), chain_start='last')

        sheet = self.write_and_load(path, [aligned], {'A': 1}, {'A': ['red']})

        assert sheet.cell(row=2, column=3).value in (None, '')
        assert sheet.cell(row=2, column=4).value == 'A'


class TestGetWriter:
    """Writer selection."""

    def test_console(self):
        assert isinstance(get_writer('console', {}), ConsoleWriter)

    def test_csv_requires_path(self, temp_output_dir):
        assert isinstance(get_writer('csv', {}, outfile=temp_output_dir / "o.csv"), CsvWriter)
        with pytest.raises(ValueError):
            get_writer('csv', {})

    def test_xlsx_requires_path(self, temp_output_dir):
        assert isinstance(get_writer('xlsx', {}, outfile=temp_output_dir / "o.xlsx"), XlsxWriter)
        with pytest.raises(ValueError):
            get_writer('xlsx', {})

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            get_writer('xls', {})

    def test_default_output_path(self):
        assert default_output_path('/data/run/reads.csv', 'csv') == Path('/data/run/reads.aligned.csv')

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
