"""
数据加载器
从CSV文件读取待聚类的数据点，保存和读取聚类标签
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..clustering.labels import Label, LabelKind, NOISE, labels_to_array

PathLike = Union[str, Path]


def load_points_csv(file_path: PathLike,
                    columns: Optional[Sequence[str]] = None,
                    nrows: Optional[int] = None) -> np.ndarray:
    """
    加载多维数据点

    Args:
        file_path: CSV文件路径（带表头）
        columns: 要读取的列名，为None时读取所有数值列
        nrows: 限制加载的行数

    Returns:
        形状为(n_samples, n_features)的float64数组
    """
    df = pd.read_csv(file_path, nrows=nrows)

    if columns is None:
        df = df.select_dtypes(include='number')
    else:
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise ValueError(f"CSV中缺少列: {missing}")
        df = df[list(columns)]

    if df.shape[1] == 0:
        raise ValueError(f"{file_path} 中没有可用的数值列")

    return df.to_numpy(dtype=np.float64)


def load_values_csv(file_path: PathLike, column: Optional[str] = None,
                    nrows: Optional[int] = None) -> np.ndarray:
    """
    加载一维数据（有序引擎的输入）

    Args:
        file_path: CSV文件路径（带表头）
        column: 列名，为None时取第一个数值列
        nrows: 限制加载的行数

    Returns:
        形状为(n_samples,)的float64数组
    """
    points = load_points_csv(file_path, None if column is None else [column], nrows)
    return points[:, 0]


def labels_to_dataframe(data: Sequence, labels: Sequence[Label]) -> pd.DataFrame:
    """
    将数据和标签合并为DataFrame

    Args:
        data: 输入数据（一维或二维）
        labels: 标签序列

    Returns:
        数据列后接 label 和 cluster_id 两列
    """
    if len(data) != len(labels):
        raise ValueError(f"数据长度 {len(data)} 与标签长度 {len(labels)} 不一致")

    values = np.asarray(data)
    if values.ndim == 1:
        df = pd.DataFrame({'value': values})
    else:
        df = pd.DataFrame(values, columns=[f'x{i}' for i in range(values.shape[1])])

    df['label'] = [label.kind.value for label in labels]
    df['cluster_id'] = labels_to_array(labels)
    return df


def save_labels_csv(output_path: PathLike, data: Sequence,
                    labels: Sequence[Label]) -> Path:
    """
    保存聚类标签

    Args:
        output_path: 输出文件路径
        data: 输入数据
        labels: 标签序列

    Returns:
        实际写入的文件路径
    """
    output_path = Path(output_path).with_suffix('.csv')
    output_path.parent.mkdir(parents=True, exist_ok=True)
    labels_to_dataframe(data, labels).to_csv(output_path, index=False)
    return output_path


def load_labels_csv(file_path: PathLike) -> List[Label]:
    """读取save_labels_csv写出的标签"""
    df = pd.read_csv(file_path)

    labels = []
    for kind, cluster_id in zip(df['label'], df['cluster_id']):
        kind = LabelKind(kind)
        if kind is LabelKind.NOISE:
            labels.append(NOISE)
        else:
            labels.append(Label(kind, int(cluster_id)))
    return labels
