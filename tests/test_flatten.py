import pytest
import lazy
from args import InvalidArgument


NESTED = [1, [2, 3], [4, [5, 6]]]


class TestFlatten:
    """Test recursive flattening with depth control"""

    def test_unbounded(self):
        """Test flattening without a depth limit"""
        assert list(lazy.flatten(NESTED)) == [1, 2, 3, 4, 5, 6]

    def test_depth_one(self):
        """Test that depth=1 unwraps exactly one level"""
        assert list(lazy.flatten(NESTED, 1)) == [1, 2, 3, 4, [5, 6]]

    def test_depth_two(self):
        """Test that depth=2 unwraps two levels"""
        data = [[1, [2, [3, [4]]]]]
        assert list(lazy.flatten(data, 2)) == [1, 2, [3, [4]]]

    def test_depth_zero_leaves_items(self):
        """Test that depth=0 yields items unchanged"""
        assert list(lazy.flatten(NESTED, 0)) == NESTED

    def test_strings_are_leaves(self):
        """Test that strings and bytes are never unwrapped"""
        data = ["ab", ["cd", [b"ef"]], "g"]
        assert list(lazy.flatten(data)) == ["ab", "cd", b"ef", "g"]

    def test_mixed_iterables(self):
        """Test tuples, sets, generators and mappings as nested values"""
        data = [(1, 2), {"a": 3, "b": [4]}, (x for x in [5, 6]), {7}]
        assert list(lazy.flatten(data)) == [1, 2, 3, 4, 5, 6, 7]

    def test_is_lazy(self):
        """Test that only the needed part of an infinite nesting is walked"""
        def deep():
            n = 0
            while True:
                yield [n, [n + 1]]
                n += 2

        flattened = lazy.flatten(deep())
        assert [next(flattened) for _ in range(5)] == [0, 1, 2, 3, 4]

    def test_rejects_negative_depth(self):
        """Test depth validation"""
        with pytest.raises(InvalidArgument) as exc_info:
            lazy.flatten(NESTED, -1)
        assert exc_info.value.position == 2

        with pytest.raises(InvalidArgument):
            lazy.flatten(NESTED, 1.5)

    def test_rejects_non_iterable(self):
        """Test sequence validation"""
        with pytest.raises(InvalidArgument):
            lazy.flatten(42)


class TestFlatMap:
    """Test map fused with one level of flattening"""

    def test_duplicates(self):
        """Test flat_map with a list-returning function"""
        assert list(lazy.flat_map(lambda x: [x, x], [1, 2])) == [1, 1, 2, 2]

    def test_only_one_level(self):
        """Test that inner elements are not flattened further"""
        assert list(lazy.flat_map(lambda x: [[x]], [1, 2])) == [[1], [2]]

    def test_empty_results(self):
        """Test items that map to empty iterables"""
        assert list(lazy.flat_map(lambda x: range(x), [0, 2, 0, 1])) == [0, 1, 0]

    def test_non_iterable_result_raises_on_pull(self):
        """Test that a bad function result fails when pulled, not earlier"""
        result = lazy.flat_map(lambda x: x, [1])
        with pytest.raises(TypeError):
            next(result)
