"""
数据处理模块
聚类输入的加载、清洗和排序
"""

from .loader import load_points_csv, load_values_csv, labels_to_dataframe, save_labels_csv, load_labels_csv
from .preprocessor import drop_missing, sort_values, restore_order, prepare_sorted_input

__all__ = [
    'load_points_csv',
    'load_values_csv',
    'labels_to_dataframe',
    'save_labels_csv',
    'load_labels_csv',
    'drop_missing',
    'sort_values',
    'restore_order',
    'prepare_sorted_input'
]
