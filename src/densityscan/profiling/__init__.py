"""
性能分析模块
聚类引擎的时间、内存和距离计算次数分析
"""

from .memory_profiler import MemoryProfiler, MemorySnapshot
from .time_profiler import TimeProfiler, TimeMeasurement
from .performance_analyzer import (
    PerformanceAnalyzer,
    ImplementationResult,
    CountingDistance,
    generate_1d_clusters
)

__all__ = [
    'MemoryProfiler',
    'MemorySnapshot',
    'TimeProfiler',
    'TimeMeasurement',
    'PerformanceAnalyzer',
    'ImplementationResult',
    'CountingDistance',
    'generate_1d_clusters'
]
