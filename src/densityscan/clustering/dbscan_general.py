"""
通用DBSCAN实现
任意度量空间上的暴力密度可达扩展
"""

import time
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from .labels import NOISE, ClassifyResult, ClusterId, DataIdx, Label, cluster_stats
from .params import DBSCANParams
from .utils import DistanceFn, check_distance_contract, get_metric, region_query


class _GeneralRun:
    """一次聚类运行的状态（访问标记与标签），仅在单次调用内有效"""

    def __init__(self, params: DBSCANParams, data: Sequence[Any],
                 distance: DistanceFn, inclusive: bool):
        self.params = params
        self.data = data
        self.distance = distance
        self.inclusive = inclusive
        self.labels: List[Label] = [NOISE] * len(data)
        self.is_visited: List[bool] = [False] * len(data)

    def range_query(self, sample: Any) -> List[DataIdx]:
        """查找样本邻域内的所有点（包含自身）"""
        return region_query(self.data, sample, self.distance,
                            self.params.epsilon, self.inclusive)

    def classify(self) -> ClassifyResult:
        if len(self.data) == 0:
            return [], None

        next_cluster = 0
        for idx, sample in enumerate(self.data):
            if self.is_visited[idx]:
                continue
            self.is_visited[idx] = True

            neighbors = self.range_query(sample)
            if len(neighbors) < self.params.min_points:
                # 暂时保持噪声，之后可能被其他簇认领为边界点
                continue

            # 发现核心点，开始新的聚类
            self.labels[idx] = Label.core(next_cluster)
            self._expand_cluster(neighbors, ClusterId(next_cluster))
            next_cluster += 1

        cluster_count = next_cluster - 1 if next_cluster > 0 else None
        return self.labels, cluster_count

    def _expand_cluster(self, seeds: List[DataIdx], cluster_id: ClusterId) -> None:
        """
        从种子点扩展聚类

        使用可增长的工作列表代替递归，簇的大小不受调用栈深度限制。
        每个下标在一次扩展中至多入队一次，工作列表长度不超过数据量。

        Args:
            seeds: 种子点下标列表（会被追加）
            cluster_id: 当前聚类ID
        """
        queued = set(seeds)
        i = 0
        while i < len(seeds):
            idx = seeds[i]
            i += 1

            if self.labels[idx].is_noise:
                self.labels[idx] = Label.edge(cluster_id)

            if self.is_visited[idx]:
                continue
            self.is_visited[idx] = True

            neighbors = self.range_query(self.data[idx])
            if len(neighbors) >= self.params.min_points:
                self.labels[idx] = Label.core(cluster_id)
                for neighbor in neighbors:
                    if neighbor in queued:
                        continue
                    # 已访问且已归属某个簇的点出队时什么也不做
                    if self.is_visited[neighbor] and not self.labels[neighbor].is_noise:
                        continue
                    queued.add(neighbor)
                    seeds.append(neighbor)


class DBSCANGeneral:
    """任意度量空间上的暴力DBSCAN"""

    def __init__(self, params: DBSCANParams,
                 metric: Union[str, DistanceFn] = 'euclidean',
                 inclusive: bool = False, verify: bool = False):
        """
        初始化通用DBSCAN

        Args:
            params: DBSCAN参数
            metric: 距离度量名称或距离函数 (T, T) -> D
            inclusive: 邻域是否包含距离恰好等于epsilon的点（默认严格小于）
            verify: 校验模式，运行前检查距离函数的确定性与对称性
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

    def classify(self, data: Sequence[Any]) -> ClassifyResult:
        """
        执行聚类

        Args:
            data: 输入数据序列，元素类型不限

        Returns:
            (标签列表, 最大簇编号；没有簇时为None)
        """
        if self.verify:
            check_distance_contract(data, self.distance)
        return _GeneralRun(self.params, data, self.distance, self.inclusive).classify()

    def fit(self, data: Sequence[Any]) -> 'DBSCANGeneral':
        """执行聚类并保存结果，返回自身"""
        self._reset_results()
        start_time = time.time()

        labels, cluster_count = self.classify(data)

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


def classify_general(params: DBSCANParams, data: Sequence[Any],
                     distance_fn: DistanceFn, inclusive: bool = False) -> ClassifyResult:
    """使用通用引擎对数据进行一次聚类"""
    return DBSCANGeneral(params, metric=distance_fn, inclusive=inclusive).classify(data)
