"""
densityscan
基于密度的DBSCAN聚类：通用暴力引擎与有序一维数据的二分查找引擎
"""

from .clustering import (
    DBSCANParams,
    new_parameters,
    Label,
    LabelKind,
    NOISE,
    DensityScanError,
    DataIsNotSorted,
    DistanceContractError,
    DBSCANGeneral,
    DBSCANSorted,
    classify_general,
    classify_sorted,
    classify_sorted_unchecked,
    is_sorted,
    labels_to_array,
    cluster_stats
)

__version__ = '0.1.0'

__all__ = [
    'DBSCANParams',
    'new_parameters',
    'Label',
    'LabelKind',
    'NOISE',
    'DensityScanError',
    'DataIsNotSorted',
    'DistanceContractError',
    'DBSCANGeneral',
    'DBSCANSorted',
    'classify_general',
    'classify_sorted',
    'classify_sorted_unchecked',
    'is_sorted',
    'labels_to_array',
    'cluster_stats',
    '__version__'
]
