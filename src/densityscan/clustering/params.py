"""
DBSCAN参数模型
邻域半径与密度阈值，两个聚类引擎共享只读
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class DBSCANParams:
    """
    不可变的DBSCAN参数

    Attributes:
        epsilon: 邻域半径，与距离值做（偏序）比较
        min_points: 核心点所需的最少邻居数（包含自身）
    """
    epsilon: Any
    min_points: int

    def __post_init__(self):
        # bool是int的子类，这里显式排除
        if isinstance(self.min_points, bool) or not isinstance(self.min_points, int):
            raise ValueError(f"min_points必须是整数: {self.min_points!r}")
        if self.min_points < 1:
            raise ValueError(f"min_points必须大于等于1: {self.min_points}")


def new_parameters(epsilon: Any, min_points: int) -> DBSCANParams:
    """创建DBSCAN参数"""
    return DBSCANParams(epsilon=epsilon, min_points=min_points)
