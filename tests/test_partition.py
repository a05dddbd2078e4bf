import pytest
import lazy
from args import InvalidArgument


class TestPartition:
    """Test the split into matching and non-matching iterators"""

    def test_split(self, call_log):
        """Test both halves and the predicate call count"""
        even, odd = lazy.partition(call_log, [1, 2, 3, 4, 5])

        assert list(even) == [2, 4]
        assert list(odd) == [1, 3, 5]
        assert len(call_log.calls) == 5, f"Expected 5 predicate calls, got {len(call_log.calls)}"

    def test_interleaved_consumption(self, call_log):
        """Test that interleaving the two halves never re-runs the predicate"""
        even, odd = lazy.partition(call_log, [1, 2, 3, 4, 5, 6])

        assert next(odd) == 1
        assert next(even) == 2
        assert next(odd) == 3
        assert next(even) == 4
        assert list(odd) == [5]
        assert list(even) == [6]
        assert sorted(call_log.calls) == [1, 2, 3, 4, 5, 6]

    def test_one_half_abandoned(self, call_log):
        """Test driving only one half"""
        even, _ = lazy.partition(call_log, [1, 2, 3, 4])
        assert list(even) == [2, 4]
        assert call_log.calls == [1, 2, 3, 4]

    def test_nothing_runs_before_pull(self, call_log):
        """Test that partition itself evaluates nothing"""
        lazy.partition(call_log, [1, 2, 3])
        assert call_log.calls == []

    def test_keys_preserved(self):
        """Test that both halves report source keys"""
        data = {"a": 1, "b": 2, "c": 3}
        big, small = lazy.partition(lambda v: v > 1, data)
        assert dict(big.items()) == {"b": 2, "c": 3}
        assert dict(small.items()) == {"a": 1}

    def test_positional_keys(self):
        """Test that list sources are keyed by index"""
        big, small = lazy.partition(lambda v: v > 1, [5, 0, 7])
        assert list(big.items()) == [(0, 5), (2, 7)]
        assert list(small.items()) == [(1, 0)]

    def test_predicate_errors_propagate(self):
        """Test that predicate errors surface unchanged at pull time"""
        def boom(x):
            raise KeyError(x)

        first, second = lazy.partition(boom, [1])
        with pytest.raises(KeyError):
            next(first)

    def test_validation_is_eager(self):
        """Test that bad arguments fail at call time"""
        with pytest.raises(InvalidArgument) as exc_info:
            lazy.partition(lambda x: x, None)
        assert exc_info.value.position == 2
        assert exc_info.value.function == "partition"
