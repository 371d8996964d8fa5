#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Tests for read alignment (pass 2).

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from crispalign.alignment import CellKind, ChainResolver, InstanceLabeler, ReadAligner
from crispalign.errors import ColumnCountError, ConfigurationError
from crispalign.io import Read

from conftest import build_model


def chain_read(*groups, sample='s', count=1):
    """Read whose record is already in chain order."""
    return Read(sample, count, tuple(groups))


def kinds_and_groups(cells):
    return [(c.kind, c.group) for c in cells if c.is_group]


# ═══════════════════════════════════════════════════════════════════════
#  Splicing inferred ancestors
# ═══════════════════════════════════════════════════════════════════════

class TestSplice:
    """Insertion of inferred ancestors."""

    def test_missing_ancestor_inferred(self, q_z_f_model):
        """F alone is aligned as if Z preceded it."""
        aligner = ReadAligner(q_z_f_model, numcols=3, chain_start='first')
        row = aligner.align(chain_read('F'))

        assert [c.text for c in row.cells] == ['(Z)', 'F-1', '*']
        assert row.cells[0].kind is CellKind.INFERRED

    def test_matching_predecessor_adds_nothing(self):
        model = build_model(['A', 'G'], ['A', 'G'])
        aligner = ReadAligner(model, chain_start='first')

        cells = aligner.splice(['A', 'G'])

        assert kinds_and_groups(cells) == [(CellKind.BARE, 'A'), (CellKind.BARE, 'G')]

    def test_contradicting_read_adds_nothing(self):
        """X precedes G, but G's probable predecessor is A."""
        model = build_model(['A', 'G'], ['A', 'G'], ['X', 'G'])
        aligner = ReadAligner(model, chain_start='first')

        assert aligner.resolver.resolve('G') == ('A',)
        cells = aligner.splice(['X', 'G'])

        assert kinds_and_groups(cells) == [(CellKind.BARE, 'X'), (CellKind.BARE, 'G')]

    def test_whole_probable_chain_inferred(self, abcd_model):
        aligner = ReadAligner(abcd_model, numcols=4, chain_start='first')

        cells = aligner.splice(['D'])

        assert kinds_and_groups(cells) == [
            (CellKind.INFERRED, 'A'),
            (CellKind.INFERRED, 'B'),
            (CellKind.INFERRED, 'C'),
            (CellKind.BARE, 'D'),
        ]

    def test_interior_gap_filled_up_to_actual_predecessor(self, abcd_model):
        aligner = ReadAligner(abcd_model, chain_start='first')

        cells = aligner.splice(['A', 'D'])

        assert kinds_and_groups(cells) == [
            (CellKind.BARE, 'A'),
            (CellKind.INFERRED, 'B'),
            (CellKind.INFERRED, 'C'),
            (CellKind.BARE, 'D'),
        ]

    def test_earlier_groups_inferred_too(self, abcd_model):
        """Each group of the read gets its own missing ancestors."""
        aligner = ReadAligner(abcd_model, chain_start='first')

        cells = aligner.splice(['B', 'D'])

        assert kinds_and_groups(cells) == [
            (CellKind.INFERRED, 'A'),
            (CellKind.BARE, 'B'),
            (CellKind.INFERRED, 'C'),
            (CellKind.BARE, 'D'),
        ]

    def test_complete_read_unchanged(self, abcd_model):
        aligner = ReadAligner(abcd_model, chain_start='first')

        cells = aligner.splice(['A', 'B', 'C', 'D'])

        assert all(c.kind is CellKind.BARE for c in cells)
        assert [c.group for c in cells] == ['A', 'B', 'C', 'D']

    def test_unknown_groups_pass_through(self, abcd_model):
        aligner = ReadAligner(abcd_model, chain_start='first')

        cells = aligner.splice(['new_1', 'new_2'])

        assert [c.group for c in cells] == ['new_1', 'new_2']


# ═══════════════════════════════════════════════════════════════════════
#  Row shape and orientation
# ═══════════════════════════════════════════════════════════════════════

class TestRow:
    """Padding, orientation and width limits."""

    def test_display_order_restored_for_chain_start_last(self, q_z_f_model):
        aligner = ReadAligner(q_z_f_model, numcols=3, chain_start='last')
        row = aligner.align(Read('S3', 1, ('F',)))

        assert row.to_row() == ['S3', 1, '*', 'F-1', '(Z)']

    def test_reversed_record_aligns_like_chain_record(self, abcd_model):
        last = ReadAligner(abcd_model, numcols=5, chain_start='last')
        first = ReadAligner(abcd_model, numcols=5, chain_start='first')

        row_last = last.align(Read('s', 1, ('D', 'A')))
        row_first = first.align(Read('s', 1, ('A', 'D')))

        assert row_last.cells == row_first.cells
        assert row_last.to_row()[2:] == list(reversed(row_first.to_row()[2:]))

    def test_every_row_has_numcols_cells(self, abcd_model):
        aligner = ReadAligner(abcd_model, numcols=7, chain_start='first')

        for groups in (['A'], ['D'], ['A', 'D'], ['A', 'B', 'C', 'D'], ['x']):
            assert len(aligner.align(chain_read(*groups))) == 7

    def test_exact_fit(self, abcd_model):
        aligner = ReadAligner(abcd_model, numcols=4, chain_start='first')

        row = aligner.align(chain_read('D'))

        assert all(c.kind is not CellKind.NO_DATA for c in row.cells)

    def test_too_few_columns_raises(self, abcd_model):
        aligner = ReadAligner(abcd_model, numcols=2, chain_start='first')

        with pytest.raises(ColumnCountError) as excinfo:
            aligner.align(chain_read('D', sample='wide'))

        assert excinfo.value.required == 4
        assert excinfo.value.numcols == 2
        assert excinfo.value.sample == 'wide'
        assert isinstance(excinfo.value, ConfigurationError)
        assert '--numcols 4' in str(excinfo.value)

    def test_invalid_numcols(self, abcd_model):
        with pytest.raises(ValueError):
            ReadAligner(abcd_model, numcols=0)


# ═══════════════════════════════════════════════════════════════════════
#  Labels and determinism
# ═══════════════════════════════════════════════════════════════════════

class TestDeterminism:
    """Repeatable output for a fixed corpus."""

    def test_rerun_identical(self, abcd_model):
        reads = [chain_read(*g) for g in (['D'], ['A', 'D'], ['B', 'D'], ['A', 'B', 'C', 'D'])]

        first_run = ReadAligner(abcd_model, chain_start='first')
        second_run = ReadAligner(abcd_model, chain_start='first')

        first = [first_run.align(r).to_row() for r in reads]
        second = [second_run.align(r).to_row() for r in reads]

        assert first == second

    def test_same_context_same_label_across_reads(self, abcd_model):
        aligner = ReadAligner(abcd_model, chain_start='first')

        full = aligner.align(chain_read('A', 'B', 'C', 'D'))
        inferred = aligner.align(chain_read('D'))

        assert [c.label for c in full.cells[:4]] == [c.label for c in inferred.cells[:4]]
        assert inferred.cells[0].kind is CellKind.INFERRED

    def test_shared_resolver_and_labeler(self, abcd_model):
        resolver = ChainResolver(abcd_model)
        labeler = InstanceLabeler(abcd_model)
        aligner = ReadAligner(abcd_model, chain_start='first', resolver=resolver, labeler=labeler)

        aligner.align(chain_read('D'))

        assert aligner.resolver is resolver
        assert aligner.labeler is labeler
        assert 'D' in resolver.cache
        assert len(labeler) > 0

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
