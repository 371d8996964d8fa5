#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CrispAlign v0.1.0

Predecessor Chain Resolver — most probable ancestor chain for a group.

Example: if group2 followed group1 in 5 reads and group3 in 6 reads,
resolve('group2') is ('group3',) plus whatever precedes group3.

Author: CrispAlign Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import Dict, List, MutableMapping, Optional, Tuple

from .cells import CHAIN_START
from .frequency import FrequencyModel

logger = logging.getLogger(__name__)

Chain = Tuple[str, ...]


def best_predecessor(model: FrequencyModel, group: str) -> Optional[str]:
    """
    Most frequent predecessor of ``group``, or None if it has none.

    Ranking: unique-read count, then abundance-weighted score, then the
    lexicographically smallest identifier.
    """
    counts = model.predecessors(group)
    if not counts:
        return None
    scores = model.predecessor_scores(group)
    return min(counts, key=lambda prev: (-counts[prev], -scores.get(prev, 0), prev))


class ChainResolver:
    """
    Resolve and memoize probable predecessor chains.

    Resolution is a pure function of the frozen FrequencyModel, so the
    cache never needs invalidating and may be shared between aligners.
    """

    def __init__(self, model: FrequencyModel,
                 cache: Optional[MutableMapping[str, Chain]] = None):
        """
        Args:
            model: Frozen corpus statistics
            cache: External memo mapping (group -> chain); a new dict if None
        """
        self.model = model
        self.cache: MutableMapping[str, Chain] = cache if cache is not None else {}
        self.cycles_detected = 0

    def resolve(self, group: str) -> Chain:
        """
        Probable ancestors of ``group``, most distant first.

        The walk stops at the chain-start sentinel, at a group without
        predecessors, or when it would revisit a group already on the walk.
        The result never contains ``group`` itself.
        """
        cached = self.cache.get(group)
        if cached is not None:
            return cached

        walked: List[str] = []
        visited = {group}
        tail: Chain = ()
        current = group

        while True:
            prev = best_predecessor(self.model, current)
            if prev is None or prev == CHAIN_START:
                break
            if prev in visited:
                self._log_cycle(group, walked, prev)
                break
            known = self.cache.get(prev)
            if known is not None and visited.isdisjoint(known):
                walked.append(prev)
                tail = known
                break
            walked.append(prev)
            visited.add(prev)
            current = prev

        chain = tail + tuple(reversed(walked))
        self.cache[group] = chain
        return chain

    def _log_cycle(self, group: str, walked: List[str], repeat: str):
        self.cycles_detected += 1
        path = ' <- '.join([group] + walked + [repeat])
        logger.warning(f"Predecessor cycle truncated while resolving {group}: {path}")

    def __len__(self) -> int:
        return len(self.cache)


def resolve_all(model: FrequencyModel) -> Dict[str, Chain]:
    """Resolve every group in the model; mainly useful for inspection."""
    resolver = ChainResolver(model)
    return {group: resolver.resolve(group) for group in model.groups()}


__all__ = [
    'Chain',
    'best_predecessor',
    'ChainResolver',
    'resolve_all',
]

# CrispAlign v0.1.0
# Any usage is subject to this software's license.
