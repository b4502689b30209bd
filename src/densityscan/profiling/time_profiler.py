"""
时间性能分析器
测量聚类引擎各阶段的耗时，用cProfile找出热点函数
"""

import cProfile
import pstats
import time
import warnings
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd


@dataclass
class TimeMeasurement:
    """一段计时（可包含子计时）"""
    name: str
    started: float = field(default_factory=time.perf_counter)
    elapsed: Optional[float] = None
    children: List['TimeMeasurement'] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.elapsed is not None

    def finish(self) -> float:
        self.elapsed = time.perf_counter() - self.started
        return self.elapsed


class TimeProfiler:
    """嵌套计时 + 可选的cProfile热点分析"""

    def __init__(self, enable_profiling: bool = True):
        """
        Args:
            enable_profiling: profile_function时是否同时运行cProfile
        """
        self.enable_profiling = enable_profiling
        self.roots: List[TimeMeasurement] = []
        self.timings: Dict[str, List[float]] = defaultdict(list)
        self.total_time = 0.0
        self._open: List[TimeMeasurement] = []
        self._cprofile: Optional[cProfile.Profile] = None

    def start(self, name: str) -> TimeMeasurement:
        """开始计时；已有未结束的计时时作为其子计时"""
        measurement = TimeMeasurement(name)
        parent = self._open[-1].children if self._open else self.roots
        parent.append(measurement)
        self._open.append(measurement)
        return measurement

    def _close_top(self) -> TimeMeasurement:
        measurement = self._open.pop()
        self.timings[measurement.name].append(measurement.finish())
        return measurement

    def stop(self, name: Optional[str] = None) -> Optional[float]:
        """
        结束计时

        Args:
            name: 要结束的计时名称，为None时结束最内层；
                它内部尚未结束的计时一并结束

        Returns:
            耗时（秒），没有对应的计时时返回None
        """
        if not self._open:
            return None

        if name is not None:
            open_names = [m.name for m in self._open]
            if name not in open_names:
                warnings.warn(f"没有正在进行的计时 '{name}'")
                return None
            depth = len(open_names) - open_names[::-1].index(name)
            while len(self._open) > depth:
                self._close_top()

        measurement = self._close_top()
        if not self._open:
            self.total_time += measurement.elapsed
        return measurement.elapsed

    @contextmanager
    def measure(self, name: str) -> Iterator[TimeMeasurement]:
        measurement = self.start(name)
        try:
            yield measurement
        finally:
            self.stop(name)

    def last(self, name: str) -> float:
        """名称为name的最近一次耗时"""
        return self.timings[name][-1]

    def profile_function(self, func: Callable, *args, **kwargs) -> Tuple[Any, Dict[str, Any]]:
        """
        计时运行函数

        Args:
            func: 被测函数（例如某个引擎的classify）
            *args: 位置参数
            **kwargs: 关键字参数

        Returns:
            (函数返回值, 耗时摘要；启用cProfile时含top_functions)
        """
        name = getattr(func, '__name__', repr(func))
        self._cprofile = cProfile.Profile() if self.enable_profiling else None

        if self._cprofile is not None:
            self._cprofile.enable()
        try:
            with self.measure(name):
                result = func(*args, **kwargs)
        finally:
            if self._cprofile is not None:
                self._cprofile.disable()

        return result, self.summarize(name)

    def summarize(self, name: str) -> Dict[str, Any]:
        """某个计时名称的调用次数与耗时分布"""
        samples = np.asarray(self.timings.get(name) or [0.0])
        summary = {
            'function_name': name,
            'execution_time': float(samples[-1]),
            'n_calls': len(self.timings.get(name, [])),
            'avg_time': float(samples.mean()),
            'std_time': float(samples.std()),
            'min_time': float(samples.min()),
            'max_time': float(samples.max())
        }
        if self._cprofile is not None:
            summary['top_functions'] = self.top_functions(5)
        return summary

    def top_functions(self, limit: int = 10) -> List[Dict[str, Any]]:
        """
        最近一次cProfile中累计耗时最多的函数

        Returns:
            按cumtime降序的记录，未启用cProfile时为空列表
        """
        if self._cprofile is None:
            return []

        raw = pstats.Stats(self._cprofile).stats
        rows = [
            {'function': f'{func} ({filename}:{lineno})', 'ncalls': calls,
             'tottime': own_time, 'cumtime': cum_time}
            for (filename, lineno, func), (_, calls, own_time, cum_time, _) in raw.items()
        ]
        rows.sort(key=lambda row: row['cumtime'], reverse=True)
        return rows[:limit]

    def timings_frame(self) -> pd.DataFrame:
        """每个计时名称一行：次数、总耗时、占顶层总耗时的比例"""
        frame = pd.DataFrame(
            [(name, len(samples), float(np.sum(samples))) for name, samples in self.timings.items()],
            columns=['function', 'n_calls', 'total_time']
        )
        frame['time_ratio'] = frame['total_time'] / self.total_time if self.total_time else 0.0
        frame['avg_time_per_call'] = frame['total_time'] / frame['n_calls']
        return frame.sort_values('total_time', ascending=False, ignore_index=True)

    def analyze_performance_bottlenecks(self, threshold_ratio: float = 0.1) -> List[Dict[str, Any]]:
        """
        找出耗时占比超过阈值的计时

        Args:
            threshold_ratio: 占顶层总耗时的比例阈值

        Returns:
            瓶颈记录列表，按总耗时降序
        """
        if not self.timings or self.total_time == 0:
            return []
        frame = self.timings_frame()
        return frame[frame['time_ratio'] > threshold_ratio].to_dict('records')

    def reset(self) -> None:
        self.roots.clear()
        self._open.clear()
        self.timings.clear()
        self.total_time = 0.0
        self._cprofile = None
