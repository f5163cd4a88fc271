import pytest
from hypothesis import given, strategies as st

from method_chains.analysis.histogram import build_histogram, merge_histograms, summarize_histogram


class TestBuildHistogram:
    def test_counts_and_order(self):
        h = build_histogram([3, 1, 1, 2, 1, 3])
        assert h == {1: 3, 2: 1, 3: 2}
        assert list(h.keys()) == [1, 2, 3]

    def test_empty(self):
        assert build_histogram([]) == {}

    @given(lengths=st.lists(st.integers(min_value=1, max_value=50)))
    def test_total_equals_number_of_chains(self, lengths):
        h = build_histogram(lengths)
        assert sum(h.values()) == len(lengths)
        assert list(h.keys()) == sorted(h.keys())
        assert all(v > 0 for v in h.values())


class TestMergeHistograms:
    def test_merge(self):
        merged = merge_histograms({1: 2, 3: 1}, {1: 1, 2: 4}, {})
        assert merged == {1: 3, 2: 4, 3: 1}
        assert list(merged.keys()) == [1, 2, 3]

    @given(a=st.lists(st.integers(1, 9)), b=st.lists(st.integers(1, 9)))
    def test_merge_matches_concatenation(self, a, b):
        assert merge_histograms(build_histogram(a), build_histogram(b)) == build_histogram(a + b)


class TestSummarize:
    def test_stats(self):
        st_ = summarize_histogram({1: 3, 2: 1})
        assert st_.chains == 4
        assert st_.mean_length == pytest.approx(1.25)
        assert st_.median_length == pytest.approx(1.0)
        assert st_.max_length == 2
        assert st_.chained_share == pytest.approx(0.25)

    def test_p95(self):
        st_ = summarize_histogram({1: 99, 10: 1})
        assert st_.p95_length == pytest.approx(1.0)
        assert st_.max_length == 10

    def test_empty(self):
        st_ = summarize_histogram({})
        assert st_.chains == 0
        assert st_.mean_length == 0.0
        assert st_.max_length == 0
