"""
聚类算法模块
包含任意度量空间的通用DBSCAN和有序一维数据的二分查找DBSCAN
"""

from .params import DBSCANParams, new_parameters
from .labels import Label, LabelKind, NOISE, DataIdx, ClusterId, labels_to_array, cluster_stats
from .exceptions import DensityScanError, DataIsNotSorted, DistanceContractError
from .dbscan_general import DBSCANGeneral, classify_general
from .dbscan_sorted import DBSCANSorted, classify_sorted, classify_sorted_unchecked
from .utils import get_metric, is_sorted, region_query, within_epsilon

__all__ = [
    'DBSCANParams',
    'new_parameters',
    'Label',
    'LabelKind',
    'NOISE',
    'DataIdx',
    'ClusterId',
    'labels_to_array',
    'cluster_stats',
    'DensityScanError',
    'DataIsNotSorted',
    'DistanceContractError',
    'DBSCANGeneral',
    'classify_general',
    'DBSCANSorted',
    'classify_sorted',
    'classify_sorted_unchecked',
    'get_metric',
    'is_sorted',
    'region_query',
    'within_epsilon'
]
