"""
数据预处理
为有序引擎准备输入：去除缺失值、排序，并把结果映射回原始顺序
"""

import warnings
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..clustering.labels import NOISE, Label


def drop_missing(values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    去除NaN值

    NaN与任何值都不可比较，会导致有序性检查失败。

    Args:
        values: 一维数据

    Returns:
        (有效数据, 有效数据在原序列中的下标)
    """
    values = np.asarray(values, dtype=np.float64)
    if values.ndim != 1:
        raise ValueError(f"需要一维数据，实际维度: {values.ndim}")

    valid_mask = ~np.isnan(values)
    n_missing = int(np.sum(~valid_mask))
    if n_missing:
        warnings.warn(f"移除了 {n_missing} 个缺失值")

    return values[valid_mask], np.flatnonzero(valid_mask)


def sort_values(values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    对一维数据做稳定排序

    Args:
        values: 一维数据

    Returns:
        (排序后的数据, 排序置换)，满足 sorted == values[order]
    """
    values = np.asarray(values)
    order = np.argsort(values, kind='stable')
    return values[order], order


def restore_order(labels: Sequence[Label], order: np.ndarray,
                  n_total: Optional[int] = None) -> List[Label]:
    """
    将排序后数据的标签映射回原始顺序

    Args:
        labels: 排序后数据的标签
        order: 每个排序位置对应的原始下标（sort_values或prepare_sorted_input的返回值）
        n_total: 原始序列长度，被drop_missing移除的位置标记为噪声；为None时取len(order)

    Returns:
        原始顺序下的标签
    """
    if len(labels) != len(order):
        raise ValueError(f"标签长度 {len(labels)} 与置换长度 {len(order)} 不一致")

    restored: List[Label] = [NOISE] * (len(order) if n_total is None else n_total)
    for sorted_pos, original_pos in enumerate(order):
        restored[int(original_pos)] = labels[sorted_pos]
    return restored


def prepare_sorted_input(values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """
    去除缺失值并排序

    Returns:
        (排序后的有效数据, 每个排序位置对应的原始下标)
    """
    valid, valid_index = drop_missing(values)
    sorted_values, order = sort_values(valid)
    return sorted_values, valid_index[order]
