"""
工具函数测试：有序性检查、距离度量和调用约定检查
"""

import math

import pytest

from densityscan import DistanceContractError, is_sorted
from densityscan.clustering.utils import (
    EARTH_RADIUS_M,
    check_distance_contract,
    first_unsorted_position,
    get_metric,
    haversine_distance,
    region_query,
    within_epsilon,
)


class TestSortedness:
    """有序性检查"""

    @pytest.mark.parametrize("data", [[], [1.0], [1, 2, 3], [1, 1, 1], [0.5, 0.5, 2.0]])
    def test_sorted_sequences(self, data):
        assert is_sorted(data)
        assert first_unsorted_position(data) is None

    def test_reports_first_descent(self):
        assert first_unsorted_position([3.0, 1.0, 2.0]) == 0
        assert first_unsorted_position([1.0, 2.0, 5.0, 4.0, 3.0]) == 2

    def test_nan_is_not_sorted(self):
        """NaN与任何值都不可比较"""
        assert not is_sorted([1.0, float('nan'), 2.0])

    def test_works_on_iterators(self):
        assert is_sorted(iter(range(10)))

    def test_custom_compare(self):
        by_length = lambda a, b: len(a) - len(b)
        assert is_sorted(['a', 'bb', 'ccc'], by_length)
        assert not is_sorted(['ccc', 'a'], by_length)

    def test_incomparable_compare_result(self):
        assert first_unsorted_position([1, 2], lambda a, b: None) == 0


class TestMetrics:
    """距离度量"""

    def test_named_metrics(self):
        assert get_metric('absolute')(1.5, 4.0) == pytest.approx(2.5)
        assert get_metric('euclidean')([0, 0], [3, 4]) == pytest.approx(5.0)
        assert get_metric('cityblock')([0, 0], [3, 4]) == pytest.approx(7.0)
        assert get_metric('chebyshev')([0, 0], [3, 4]) == pytest.approx(4.0)

    def test_callable_passthrough(self):
        fn = lambda a, b: 0
        assert get_metric(fn) is fn

    def test_unknown_metric(self):
        with pytest.raises(ValueError, match="不支持的度量方式"):
            get_metric('manhattan-ish')

    def test_haversine_quarter_meridian(self):
        distance = haversine_distance([0.0, 0.0], [90.0, 0.0])
        assert distance == pytest.approx(math.pi / 2 * EARTH_RADIUS_M)

    def test_haversine_same_point(self):
        assert haversine_distance([39.9, 116.4], [39.9, 116.4]) == pytest.approx(0.0)


class TestNeighbourhood:
    """邻域判定"""

    def test_boundary_semantics(self):
        assert within_epsilon(0.5, 0.5, inclusive=True)
        assert not within_epsilon(0.5, 0.5, inclusive=False)
        assert within_epsilon(0.4, 0.5, inclusive=False)

    def test_nan_distance_is_outside(self):
        nan = float('nan')
        assert not within_epsilon(nan, 1.0, inclusive=True)
        assert not within_epsilon(nan, 1.0, inclusive=False)

    def test_region_query_includes_self(self, abs_distance):
        data = [0.0, 0.3, 1.0, 5.0]
        assert region_query(data, data[1], abs_distance, 0.5) == [0, 1]
        assert region_query(data, data[3], abs_distance, 0.5) == [3]

    def test_region_query_inclusive(self, abs_distance):
        data = [0.0, 0.5, 1.0]
        assert region_query(data, 0.5, abs_distance, 0.5, inclusive=True) == [0, 1, 2]
        assert region_query(data, 0.5, abs_distance, 0.5) == [1]


class TestDistanceContract:
    """距离函数约定检查"""

    def test_symmetric_metric_passes(self, abs_distance):
        check_distance_contract([0.0, 1.0, 2.5], abs_distance)

    def test_nan_results_count_as_deterministic(self):
        check_distance_contract([1.0, 2.0], lambda a, b: float('nan'))

    def test_asymmetric_metric_fails(self):
        with pytest.raises(DistanceContractError, match="不对称"):
            check_distance_contract([0.0, 1.0], lambda a, b: a - b)

    def test_nondeterministic_metric_fails(self):
        calls = []

        def drifting(a, b):
            calls.append(1)
            return len(calls)

        with pytest.raises(DistanceContractError, match="不确定"):
            check_distance_contract([0.0], drifting)
