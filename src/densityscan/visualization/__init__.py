"""
可视化模块
聚类结果的绘图
"""

from .plot_clusters import ClusterVisualizer

__all__ = [
    'ClusterVisualizer'
]
