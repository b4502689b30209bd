"""
有序一维数据的DBSCAN实现
利用输入已排序的前提，用二分查找代替暴力邻域查询
"""

import time
from bisect import bisect_left
from typing import Any, List, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import DataIsNotSorted, DistanceContractError
from .labels import NOISE, ClassifyResult, DataIdx, Label, cluster_stats
from .params import DBSCANParams
from .utils import (DistanceFn, check_distance_contract, first_unsorted_position,
                    get_metric, within_epsilon)


class _SortedRun:
    """
    一次有序数据聚类运行

    数据按距离所依据的同一顺序排好序，因此固定点到其他点的距离沿序列
    向两侧单调不减，邻域总是一个连续的下标区间。
    """

    def __init__(self, params: DBSCANParams, data: Sequence[Any],
                 distance: DistanceFn, inclusive: bool):
        self.params = params
        self.data = data
        self.distance = distance
        self.inclusive = inclusive

    def _within(self, idx: int, anchor: Any) -> bool:
        return within_epsilon(self.distance(self.data[idx], anchor),
                              self.params.epsilon, self.inclusive)

    def core_window(self, i: int) -> Tuple[DataIdx, DataIdx]:
        """
        二分查找位置i的邻域区间

        Args:
            i: 数据下标

        Returns:
            (lo, hi)，区间[lo, hi)内的点到data[i]的距离都在epsilon内
        """
        anchor = self.data[i]
        # 左侧：第一个落入邻域的位置
        lo = bisect_left(range(i + 1), True,
                         key=lambda j: self._within(j, anchor))
        # 右侧：从i开始第一个超出邻域的位置
        reach = bisect_left(range(i, len(self.data)), True,
                            key=lambda j: not self._within(j, anchor))
        return DataIdx(lo), DataIdx(i + reach)

    def distinct_core(self, i: int) -> Optional[int]:
        """
        判断位置i是否为核心点

        Returns:
            是核心点时返回从i开始向右仍在邻域内的点数，否则返回None
        """
        lo, hi = self.core_window(i)
        if hi - lo >= self.params.min_points:
            return hi - i
        return None

    def classify(self) -> ClassifyResult:
        n_samples = len(self.data)
        labels: List[Label] = [NOISE] * n_samples
        if n_samples == 0:
            return labels, None

        cursor = 0
        current_cluster = 0
        highest_written = -1

        while cursor < n_samples:
            reach = self.distinct_core(cursor)

            if not reach:
                # 非核心点（距离函数不自反时reach可能为0，同样跳过）
                cursor += 1
            elif reach == 1:
                # NOTE: 向右只覆盖自身的核心点不会被写入标签，只推进游标并
                # 开启新的簇编号；若该点此前未被某段覆盖，它将保持为噪声。
                cursor += 1
                current_cluster += 1
            else:
                labels[cursor:cursor + reach] = [Label.core(current_cluster)] * reach
                highest_written = current_cluster
                # 回退一位，继续检查与下一段邻域的重叠
                cursor += reach - 1

        cluster_count = max(current_cluster - 1, highest_written)
        return labels, cluster_count if cluster_count >= 0 else None


class DBSCANSorted:
    """面向已排序标量数据的二分查找DBSCAN"""

    def __init__(self, params: DBSCANParams,
                 metric: Union[str, DistanceFn] = 'absolute',
                 inclusive: bool = True, verify: bool = False):
        """
        初始化有序DBSCAN

        Args:
            params: DBSCAN参数
            metric: 距离度量名称或距离函数，必须与数据的排序一致
            inclusive: 邻域是否包含距离恰好等于epsilon的点（默认包含）
            verify: 校验模式，运行前检查距离函数约定；
                在不检查有序性的入口上也会检查有序性
        """
        self.params = params
        self.metric = metric
        self.distance = get_metric(metric)
        self.inclusive = inclusive
        self.verify = verify

        self.labels_: Optional[List[Label]] = None
        self.cluster_count_: Optional[int] = None
        self.core_sample_indices_: Optional[np.ndarray] = None
        self.execution_time = 0.0

    def _runner(self, data: Sequence[Any]) -> _SortedRun:
        if self.verify:
            check_distance_contract(data, self.distance)
        return _SortedRun(self.params, data, self.distance, self.inclusive)

    def check_sorted(self, data: Sequence[Any]) -> None:
        """
        检查前置条件

        Raises:
            DataIsNotSorted: 数据不是升序排列
        """
        position = first_unsorted_position(data)
        if position is not None:
            raise DataIsNotSorted(position)

    def classify(self, data: Sequence[Any]) -> ClassifyResult:
        """
        检查有序性后执行聚类

        Args:
            data: 升序排列的数据（允许相等元素）

        Returns:
            (标签列表, 最大簇编号；没有簇时为None)

        Raises:
            DataIsNotSorted: 数据不是升序排列，此时不做任何计算
        """
        self.check_sorted(data)
        return self._runner(data).classify()

    def classify_unchecked(self, data: Sequence[Any]) -> ClassifyResult:
        """
        跳过有序性检查执行聚类

        调用方需自行保证数据有序，否则结果无定义。
        """
        if self.verify:
            position = first_unsorted_position(data)
            if position is not None:
                raise DistanceContractError(f"未检查入口收到无序数据: 位置 {position}")
        return self._runner(data).classify()

    def core_window(self, data: Sequence[Any], i: int) -> Tuple[DataIdx, DataIdx]:
        """位置i的邻域区间[lo, hi)（不检查有序性）"""
        return _SortedRun(self.params, data, self.distance, self.inclusive).core_window(i)

    def distinct_core(self, data: Sequence[Any], i: int) -> Optional[int]:
        """位置i为核心点时返回向右的邻域点数，否则返回None（不检查有序性）"""
        return _SortedRun(self.params, data, self.distance, self.inclusive).distinct_core(i)

    def fit(self, data: Sequence[Any], check_sorted: bool = True) -> 'DBSCANSorted':
        """
        执行聚类并保存结果

        Args:
            data: 升序排列的数据
            check_sorted: 是否检查有序性

        Returns:
            self: 返回聚类器实例

        Raises:
            DataIsNotSorted: 数据无序；此前fit的结果已被清除
        """
        self._reset_results()
        start_time = time.time()

        if check_sorted:
            labels, cluster_count = self.classify(data)
        else:
            labels, cluster_count = self.classify_unchecked(data)

        self.labels_ = labels
        self.cluster_count_ = cluster_count
        self.core_sample_indices_ = np.array(
            [i for i, label in enumerate(labels) if label.is_core], dtype=np.int64
        )
        self.execution_time = time.time() - start_time

        return self

    def _reset_results(self) -> None:
        # 本次聚类失败时不保留上一次的结果
        self.labels_ = None
        self.cluster_count_ = None
        self.core_sample_indices_ = None
        self.execution_time = 0.0

    def get_cluster_stats(self) -> dict:
        """获取聚类统计信息"""
        if self.labels_ is None:
            return {}

        stats = cluster_stats(self.labels_)
        stats['execution_time'] = self.execution_time
        return stats


def classify_sorted(params: DBSCANParams, data: Sequence[Any],
                    distance_fn: DistanceFn, inclusive: bool = True) -> ClassifyResult:
    """检查有序性后使用有序引擎聚类，数据无序时抛出DataIsNotSorted"""
    return DBSCANSorted(params, metric=distance_fn, inclusive=inclusive).classify(data)


def classify_sorted_unchecked(params: DBSCANParams, data: Sequence[Any],
                              distance_fn: DistanceFn, inclusive: bool = True) -> ClassifyResult:
    """不检查有序性，直接使用有序引擎聚类"""
    return DBSCANSorted(params, metric=distance_fn, inclusive=inclusive).classify_unchecked(data)
