#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Pytest configuration and shared fixtures.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from crispalign.alignment import FrequencyCounter
from crispalign.config.schema import default_config


def build_model(*chains):
    """Frequency model from ``(chain, count)`` pairs or bare chains."""
    counter = FrequencyCounter()
    for item in chains:
        if isinstance(item, tuple) and len(item) == 2 and isinstance(item[1], int):
            counter.ingest(item[0], item[1])
        else:
            counter.ingest(item)
    return counter.build()


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="crispalign_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def q_z_f_model():
    """F follows Q in a 2-abundance read and Z in a 10-abundance read."""
    return build_model((['Q', 'F'], 2), (['Z', 'F'], 10), (['F'], 1))


@pytest.fixture
def abcd_model():
    """Three full A-B-C-D chains plus one read of D alone."""
    return build_model((['A', 'B', 'C', 'D'], 1), (['A', 'B', 'C', 'D'], 1),
                       (['A', 'B', 'C', 'D'], 1), (['D'], 1))


@pytest.fixture
def simple_tsv():
    """TAB-delimited reads; the last group of each record is the oldest."""
    return (
        "S1\t10\tF:Z\n"
        "S2\t2\tF:Q\n"
        "S3\t1\tF\n"
        "bad line\tx\n"
    )


@pytest.fixture
def tsv_file(temp_output_dir, simple_tsv):
    path = temp_output_dir / "reads.tsv"
    path.write_text(simple_tsv)
    return path


@pytest.fixture
def quiet_config():
    """Default configuration with warnings-only logging."""
    config = default_config()
    config['output']['logging']['level'] = 'WARNING'
    return config

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
