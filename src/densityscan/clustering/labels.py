"""
分类结果模型
每个数据点的三类标签（核心点/边界点/噪声点）及簇编号
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NewType, Optional, Sequence, Tuple, Any

import numpy as np

# 数据下标与簇编号，避免与数据值、距离值混用
DataIdx = NewType('DataIdx', int)
ClusterId = NewType('ClusterId', int)


class LabelKind(Enum):
    """标签类别"""
    CORE = 'core'
    EDGE = 'edge'
    NOISE = 'noise'


@dataclass(frozen=True)
class Label:
    """单个数据点的分类标签"""
    kind: LabelKind = LabelKind.NOISE
    cluster_id: Optional[ClusterId] = None

    @classmethod
    def core(cls, cluster_id: int) -> 'Label':
        return cls(LabelKind.CORE, ClusterId(cluster_id))

    @classmethod
    def edge(cls, cluster_id: int) -> 'Label':
        return cls(LabelKind.EDGE, ClusterId(cluster_id))

    @property
    def is_core(self) -> bool:
        return self.kind is LabelKind.CORE

    @property
    def is_edge(self) -> bool:
        return self.kind is LabelKind.EDGE

    @property
    def is_noise(self) -> bool:
        return self.kind is LabelKind.NOISE

    def __repr__(self) -> str:
        if self.kind is LabelKind.NOISE:
            return 'Noise'
        return f'{self.kind.value.capitalize()}({self.cluster_id})'


NOISE = Label()

# 一次聚类的输出：(每个点的标签, 最大簇编号或None)
ClassifyResult = Tuple[List[Label], Optional[int]]


def labels_to_array(labels: Sequence[Label]) -> np.ndarray:
    """
    将标签序列转换为整数数组

    Args:
        labels: 标签序列

    Returns:
        形状为(n,)的int32数组，噪声点为-1
    """
    return np.array(
        [-1 if label.cluster_id is None else label.cluster_id for label in labels],
        dtype=np.int32
    )


def cluster_stats(labels: Sequence[Label]) -> Dict[str, Any]:
    """
    统计聚类结果

    Args:
        labels: 标签序列

    Returns:
        包含聚类数、各类点数量和各簇大小的字典
    """
    cluster_sizes: Dict[int, int] = {}
    n_core = n_edge = n_noise = 0

    for label in labels:
        if label.is_noise:
            n_noise += 1
            continue
        if label.is_core:
            n_core += 1
        else:
            n_edge += 1
        cluster_sizes[label.cluster_id] = cluster_sizes.get(label.cluster_id, 0) + 1

    return {
        'n_clusters': len(cluster_sizes),
        'n_core_points': n_core,
        'n_edge_points': n_edge,
        'n_noise': n_noise,
        'cluster_sizes': dict(sorted(cluster_sizes.items()))
    }
