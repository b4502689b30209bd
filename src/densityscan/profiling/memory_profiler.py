"""
内存分析器
记录聚类运行前后的进程RSS，以及tracemalloc统计的Python分配峰值
"""

import os
import time
import tracemalloc
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import pandas as pd
import psutil

_MB = 1024 * 1024


@dataclass
class MemorySnapshot:
    """某一时刻的内存读数（单位MB）"""
    label: str
    offset: float
    rss_mb: float
    peak_rss_mb: float
    traced_mb: float = 0.0
    traced_peak_mb: float = 0.0


class MemoryProfiler:
    """基于psutil与tracemalloc的内存分析器，可用作上下文管理器"""

    def __init__(self, track_detailed: bool = False, verbose: bool = False):
        """
        Args:
            track_detailed: 同时用tracemalloc统计Python分配
            verbose: 每次快照都打印读数
        """
        self.track_detailed = track_detailed
        self.verbose = verbose
        self.snapshots: List[MemorySnapshot] = []
        self.peak_rss_mb = 0.0
        self._process = psutil.Process(os.getpid())
        self._t0: Optional[float] = None
        self._owns_tracing = False

    def start(self) -> None:
        self._t0 = time.perf_counter()
        self.snapshots = []
        self.peak_rss_mb = 0.0

        # 已经有人在跟踪时不接管，也不在stop时关闭
        if self.track_detailed and not tracemalloc.is_tracing():
            tracemalloc.start()
            self._owns_tracing = True

    def take_snapshot(self, label: str = "") -> MemorySnapshot:
        """
        记录一次内存读数

        Args:
            label: 快照名称

        Returns:
            新快照（同时追加到snapshots）
        """
        rss_mb = self._process.memory_info().rss / _MB
        self.peak_rss_mb = max(self.peak_rss_mb, rss_mb)

        traced = (0, 0)
        if self.track_detailed and tracemalloc.is_tracing():
            traced = tracemalloc.get_traced_memory()

        snapshot = MemorySnapshot(
            label=label,
            offset=time.perf_counter() - self._t0 if self._t0 is not None else 0.0,
            rss_mb=rss_mb,
            peak_rss_mb=self.peak_rss_mb,
            traced_mb=traced[0] / _MB,
            traced_peak_mb=traced[1] / _MB
        )
        self.snapshots.append(snapshot)

        if self.verbose:
            print(f"[{label}] RSS: {rss_mb:.2f} MB (峰值 {self.peak_rss_mb:.2f} MB), "
                  f"Python分配峰值: {snapshot.traced_peak_mb:.2f} MB")

        return snapshot

    def profile_function(self, func: Callable, *args, **kwargs) -> Tuple[Any, Dict[str, Any]]:
        """
        在独立的分析区间内运行函数

        Returns:
            (函数返回值, 运行前后的内存读数与增量)
        """
        with self:
            before = self.take_snapshot("before")
            if tracemalloc.is_tracing():
                tracemalloc.reset_peak()
            result = func(*args, **kwargs)
            after = self.take_snapshot("after")

        return result, {
            'function_name': getattr(func, '__name__', repr(func)),
            'memory_usage_before_mb': before.rss_mb,
            'memory_usage_after_mb': after.rss_mb,
            'memory_increase_mb': after.rss_mb - before.rss_mb,
            'peak_memory_mb': after.peak_rss_mb,
            'traced_peak_mb': after.traced_peak_mb
        }

    def snapshots_frame(self) -> pd.DataFrame:
        return pd.DataFrame([vars(s) for s in self.snapshots])

    def analyze_memory_patterns(self) -> Dict[str, Any]:
        """
        汇总快照序列

        Returns:
            时长、平均/最大/最小RSS和总增长；快照少于两个时为空字典
        """
        if len(self.snapshots) < 2:
            return {}

        frame = self.snapshots_frame()
        rss = frame['rss_mb']
        return {
            'total_time': float(frame['offset'].iloc[-1] - frame['offset'].iloc[0]),
            'avg_memory_usage_mb': float(rss.mean()),
            'max_memory_usage_mb': float(rss.max()),
            'min_memory_usage_mb': float(rss.min()),
            'total_memory_growth_mb': float(rss.iloc[-1] - rss.iloc[0])
        }

    def stop(self) -> None:
        if self._owns_tracing:
            tracemalloc.stop()
            self._owns_tracing = False

        if self.verbose:
            print(f"内存分析结束，RSS峰值: {self.peak_rss_mb:.2f} MB")

    def __enter__(self) -> 'MemoryProfiler':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
