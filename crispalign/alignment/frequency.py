#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Frequency Model — corpus-wide group occurrence and predecessor statistics.

Pass 1 of the aligner. Every read contributes:
- one occurrence per group (unique-read count, not abundance weighted)
- one predecessor observation per adjacent pair, both as a unique-read
  count and as an abundance-weighted score

The first group of a chain is recorded with the CHAIN_START predecessor.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Sequence

from .cells import CHAIN_START
from ..io.records import Read

logger = logging.getLogger(__name__)


# ============================================================================
#                           MUTABLE COUNTER
# ============================================================================

class FrequencyCounter:
    """
    Accumulates frequency tables during pass 1.

    Counters are commutative, so partial counters built over disjoint
    chunks of the corpus can be merged in any order.
    """

    def __init__(self):
        self.occurrences: Dict[str, int] = defaultdict(int)
        self.predecessor_counts: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self.predecessor_scores: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
        self.reads_ingested = 0
        self.reads_skipped = 0

    def ingest(self, chain: Sequence[str], count: int = 1):
        """
        Add one read's groups, given in chain order.

        Args:
            chain: Groups with the chain start first
            count: Abundance of the read
        """
        if not chain:
            self.reads_skipped += 1
            return

        previous = CHAIN_START
        for group in chain:
            self.occurrences[group] += 1
            self.predecessor_counts[group][previous] += 1
            self.predecessor_scores[group][previous] += count
            previous = group
        self.reads_ingested += 1

    def ingest_read(self, read: Read, chain_start: str = 'last'):
        """Add a Read, orienting its groups by ``chain_start``."""
        self.ingest(read.chain(chain_start), read.count)

    def merge(self, other: 'FrequencyCounter') -> 'FrequencyCounter':
        """Fold another counter's tables into this one."""
        for group, n in other.occurrences.items():
            self.occurrences[group] += n
        for group, prevs in other.predecessor_counts.items():
            for prev, n in prevs.items():
                self.predecessor_counts[group][prev] += n
        for group, prevs in other.predecessor_scores.items():
            for prev, n in prevs.items():
                self.predecessor_scores[group][prev] += n
        self.reads_ingested += other.reads_ingested
        self.reads_skipped += other.reads_skipped
        return self

    def build(self) -> 'FrequencyModel':
        """Freeze the accumulated tables into a read-only FrequencyModel."""
        return FrequencyModel(
            occurrence_table=MappingProxyType(dict(self.occurrences)),
            predecessor_table=MappingProxyType({
                g: MappingProxyType(dict(p)) for g, p in self.predecessor_counts.items()
            }),
            score_table=MappingProxyType({
                g: MappingProxyType(dict(p)) for g, p in self.predecessor_scores.items()
            }),
            reads_ingested=self.reads_ingested,
        )

    # defaultdict(lambda) can't be pickled; ship plain dicts between processes
    def __getstate__(self):
        return {
            'occurrences': dict(self.occurrences),
            'predecessor_counts': {g: dict(p) for g, p in self.predecessor_counts.items()},
            'predecessor_scores': {g: dict(p) for g, p in self.predecessor_scores.items()},
            'reads_ingested': self.reads_ingested,
            'reads_skipped': self.reads_skipped,
        }

    def __setstate__(self, state):
        self.__init__()
        self.occurrences.update(state['occurrences'])
        for g, prevs in state['predecessor_counts'].items():
            self.predecessor_counts[g].update(prevs)
        for g, prevs in state['predecessor_scores'].items():
            self.predecessor_scores[g].update(prevs)
        self.reads_ingested = state['reads_ingested']
        self.reads_skipped = state['reads_skipped']


# ============================================================================
#                           IMMUTABLE MODEL
# ============================================================================

_EMPTY: Mapping[str, int] = MappingProxyType({})


@dataclass(frozen=True)
class FrequencyModel:
    """
    Read-only corpus statistics.

    Attributes:
        occurrence_table: group -> number of reads containing it (per position)
        predecessor_table: group -> {predecessor -> unique-read count}
        score_table: group -> {predecessor -> abundance-weighted count}
        reads_ingested: Number of reads counted
    """
    occurrence_table: Mapping[str, int]
    predecessor_table: Mapping[str, Mapping[str, int]]
    score_table: Mapping[str, Mapping[str, int]]
    reads_ingested: int = 0

    @classmethod
    def from_chains(cls, chains: Iterable[Sequence[str]]) -> 'FrequencyModel':
        """Build a model from chain-ordered groups, each with count 1."""
        counter = FrequencyCounter()
        for chain in chains:
            counter.ingest(chain)
        return counter.build()

    def occurrences(self, group: str) -> int:
        return self.occurrence_table.get(group, 0)

    def is_unique(self, group: str) -> bool:
        """True if the group occurs exactly once in the whole corpus."""
        return self.occurrences(group) == 1

    def predecessors(self, group: str) -> Mapping[str, int]:
        return self.predecessor_table.get(group, _EMPTY)

    def predecessor_scores(self, group: str) -> Mapping[str, int]:
        return self.score_table.get(group, _EMPTY)

    def groups(self) -> List[str]:
        return list(self.occurrence_table)

    def __len__(self) -> int:
        return len(self.occurrence_table)


# ============================================================================
#                           PASS 1 DRIVER
# ============================================================================

def _count_chunk(chains: List[Sequence[str]], counts: List[int]) -> FrequencyCounter:
    counter = FrequencyCounter()
    for chain, count in zip(chains, counts):
        counter.ingest(chain, count)
    return counter


def _chunked(items: List, n_chunks: int) -> List[List]:
    size = max(1, -(-len(items) // n_chunks))
    return [items[i:i + size] for i in range(0, len(items), size)]


def build_frequency_model(reads: Iterable[Read], chain_start: str = 'last',
                          threads: int = 1) -> FrequencyModel:
    """
    Run pass 1 over the whole corpus.

    Args:
        reads: Reads to count (already filtered)
        chain_start: Which end of each record the chain starts at
        threads: Worker processes; chunks are counted in parallel and merged
            in chunk order

    Returns:
        Immutable FrequencyModel
    """
    reads = list(reads)
    chains = [read.chain(chain_start) for read in reads]
    counts = [read.count for read in reads]

    if threads <= 1 or len(reads) < 2 * threads:
        counter = _count_chunk(chains, counts)
    else:
        chain_chunks = _chunked(chains, threads)
        count_chunks = _chunked(counts, threads)
        logger.debug(f"Counting {len(reads)} reads in {len(chain_chunks)} chunks")
        counter = FrequencyCounter()
        with ProcessPoolExecutor(max_workers=threads) as executor:
            for partial in executor.map(_count_chunk, chain_chunks, count_chunks):
                counter.merge(partial)

    model = counter.build()
    logger.info(f"Frequency model: {model.reads_ingested} reads, {len(model)} distinct groups")
    return model


__all__ = [
    'FrequencyCounter',
    'FrequencyModel',
    'build_frequency_model',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
