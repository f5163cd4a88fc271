from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

import numpy as np


def build_histogram(lengths: Iterable[int]) -> Dict[int, int]:
    """Fold chain lengths into ``{length: count}`` with ascending keys."""
    freq = Counter(lengths)
    return {length: freq[length] for length in sorted(freq)}


def merge_histograms(*histograms: Mapping[int, int]) -> Dict[int, int]:
    total: Counter = Counter()
    for h in histograms:
        total.update(h)
    return {length: total[length] for length in sorted(total) if total[length]}


@dataclass
class ChainStats:
    chains: int
    mean_length: float
    median_length: float
    p95_length: float
    max_length: int
    chained_share: float  # share of chains with 2+ calls


def summarize_histogram(histogram: Mapping[int, int]) -> ChainStats:
    """Summary statistics of a chain-length histogram.

    Empty histograms give all-zero stats rather than NaN.
    """
    if not histogram or sum(histogram.values()) == 0:
        return ChainStats(chains=0, mean_length=0.0, median_length=0.0, p95_length=0.0, max_length=0, chained_share=0.0)

    lengths = np.array(list(histogram.keys()), dtype=np.int64)
    counts = np.array(list(histogram.values()), dtype=np.int64)
    expanded = np.repeat(lengths, counts)
    total = int(counts.sum())

    return ChainStats(
        chains=total,
        mean_length=float(np.average(lengths, weights=counts)),
        median_length=float(np.median(expanded)),
        p95_length=float(np.percentile(expanded, 95)),
        max_length=int(lengths.max()),
        chained_share=float(counts[lengths >= 2].sum()) / float(total),
    )
