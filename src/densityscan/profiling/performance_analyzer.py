"""
综合性能分析器
比较通用引擎与有序引擎的耗时、内存、距离计算次数和结果一致性
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import matplotlib

matplotlib.use('Agg')  # 非交互式后端
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.metrics import adjusted_rand_score

from ..clustering.dbscan_general import DBSCANGeneral
from ..clustering.dbscan_sorted import DBSCANSorted
from ..clustering.labels import ClassifyResult, Label, labels_to_array
from ..clustering.params import DBSCANParams
from ..clustering.utils import DistanceFn, get_metric
from .memory_profiler import MemoryProfiler
from .time_profiler import TimeProfiler


class CountingDistance:
    """记录调用次数的距离函数包装"""

    def __init__(self, distance: DistanceFn):
        self.distance = distance
        self.n_calls = 0

    def __call__(self, a: Any, b: Any) -> Any:
        self.n_calls += 1
        return self.distance(a, b)


@dataclass
class ImplementationResult:
    """单次基准测试结果"""
    name: str
    n_points: int
    execution_time: float
    memory_usage_mb: float
    peak_memory_mb: float
    n_distance_calls: Optional[int] = None
    n_clusters: Optional[int] = None
    n_noise: Optional[int] = None
    agreement: Optional[float] = None
    success: bool = True
    error: Optional[str] = None


def generate_1d_clusters(n_points: int, n_clusters: int = 5, spread: float = 0.5,
                         noise_ratio: float = 0.05, seed: Optional[int] = 0) -> np.ndarray:
    """
    生成排好序的一维测试数据

    Args:
        n_points: 点数
        n_clusters: 簇数量
        spread: 每个簇的标准差
        noise_ratio: 均匀分布噪声点的比例
        seed: 随机种子

    Returns:
        升序排列的一维数组
    """
    rng = np.random.default_rng(seed)
    n_noise = int(n_points * noise_ratio)
    n_clustered = n_points - n_noise

    centers = np.arange(n_clusters) * 10.0
    assignments = rng.integers(0, n_clusters, size=n_clustered)
    clustered = centers[assignments] + rng.normal(0.0, spread, size=n_clustered)
    noise = rng.uniform(centers[0] - 5.0, centers[-1] + 5.0, size=n_noise)

    return np.sort(np.concatenate([clustered, noise]))


class PerformanceAnalyzer:
    """综合性能分析器"""

    def __init__(self, output_dir: Optional[str] = None, verbose: bool = True):
        """
        初始化性能分析器

        Args:
            output_dir: 结果输出目录，为None时不写文件
            verbose: 是否打印进度
        """
        self.output_dir = Path(output_dir) if output_dir else None
        if self.output_dir:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        self.verbose = verbose

        self.results: List[ImplementationResult] = []
        self.labels: Dict[str, List[Label]] = {}

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message)

    def benchmark_implementation(self, name: str,
                                 classify_func: Callable[[Sequence[Any]], ClassifyResult],
                                 data: Sequence[Any],
                                 counter: Optional[CountingDistance] = None,
                                 reference_labels: Optional[Sequence[Label]] = None) -> ImplementationResult:
        """
        基准测试一个聚类实现

        Args:
            name: 实现名称
            classify_func: data -> (labels, cluster_count)
            data: 测试数据
            counter: classify_func内部使用的计数距离函数（可选）
            reference_labels: 参考标签，用于计算调整兰德指数

        Returns:
            基准测试结果
        """
        self._log(f"开始基准测试: {name} ({len(data)} 个点)")

        time_profiler = TimeProfiler(enable_profiling=False)
        memory_profiler = MemoryProfiler(track_detailed=True)

        try:
            if counter is not None:
                counter.n_calls = 0

            with time_profiler.measure(name):
                (labels, _), memory_analysis = memory_profiler.profile_function(classify_func, data)
            execution_time = time_profiler.last(name)
            self.labels[name] = labels

            label_array = labels_to_array(labels)
            agreement = None
            if reference_labels is not None:
                agreement = float(adjusted_rand_score(labels_to_array(reference_labels), label_array))

            result = ImplementationResult(
                name=name,
                n_points=len(data),
                execution_time=execution_time,
                memory_usage_mb=memory_analysis['memory_increase_mb'],
                peak_memory_mb=memory_analysis['peak_memory_mb'],
                n_distance_calls=counter.n_calls if counter is not None else None,
                n_clusters=len(set(label_array[label_array >= 0].tolist())),
                n_noise=int(np.sum(label_array < 0)),
                agreement=agreement
            )

            self._log(f"完成基准测试: {name}")
            self._log(f"  执行时间: {execution_time:.4f} 秒")
            if result.n_distance_calls is not None:
                self._log(f"  距离计算次数: {result.n_distance_calls}")
            self._log(f"  聚类数: {result.n_clusters}, 噪声点: {result.n_noise}")
            if agreement is not None:
                self._log(f"  与参考结果的一致性(ARI): {agreement:.4f}")

        except Exception as e:
            self._log(f"基准测试 {name} 失败: {e}")
            result = ImplementationResult(
                name=name,
                n_points=len(data),
                execution_time=0.0,
                memory_usage_mb=0.0,
                peak_memory_mb=0.0,
                success=False,
                error=str(e)
            )

        self.results.append(result)
        return result

    def compare_engines(self, params: DBSCANParams, data: Sequence[Any],
                        metric: Union[str, DistanceFn] = 'absolute',
                        inclusive: bool = True) -> pd.DataFrame:
        """
        在同一份有序数据上比较两个引擎

        两个引擎使用相同的邻域边界语义，以通用引擎的结果为参考。

        Args:
            params: DBSCAN参数
            data: 升序排列的一维数据
            metric: 距离度量
            inclusive: 邻域是否包含距离恰好等于epsilon的点

        Returns:
            每个引擎一行的比较结果
        """
        general_counter = CountingDistance(get_metric(metric))
        general = DBSCANGeneral(params, metric=general_counter, inclusive=inclusive)
        reference = self.benchmark_implementation(
            'general', general.classify, data, counter=general_counter
        )
        reference_labels = self.labels.get('general') if reference.success else None

        sorted_counter = CountingDistance(get_metric(metric))
        sorted_engine = DBSCANSorted(params, metric=sorted_counter, inclusive=inclusive)
        sorted_result = self.benchmark_implementation(
            'sorted', sorted_engine.classify, data, counter=sorted_counter,
            reference_labels=reference_labels
        )

        return pd.DataFrame([asdict(reference), asdict(sorted_result)])

    def analyze_scalability(self, name: str,
                            classify_factory: Callable[[CountingDistance], Callable[[Sequence[Any]], ClassifyResult]],
                            data_generator: Callable[[int], Sequence[Any]],
                            sizes: Sequence[int],
                            metric: Union[str, DistanceFn] = 'absolute') -> Dict[str, Any]:
        """
        分析可扩展性

        Args:
            name: 实现名称
            classify_factory: 接收计数距离函数、返回classify函数的工厂
            data_generator: 数据生成函数 size -> data
            sizes: 数据大小列表
            metric: 距离度量

        Returns:
            各规模的耗时、距离计算次数以及复杂度拟合结果
        """
        scalability = {
            'name': name,
            'sizes': [],
            'execution_times': [],
            'distance_calls': []
        }

        for size in sizes:
            counter = CountingDistance(get_metric(metric))
            result = self.benchmark_implementation(
                f'{name}_{size}', classify_factory(counter), data_generator(size), counter=counter
            )
            if result.success:
                scalability['sizes'].append(size)
                scalability['execution_times'].append(result.execution_time)
                scalability['distance_calls'].append(result.n_distance_calls)

        if len(scalability['sizes']) > 2:
            scalability.update(self._fit_complexity(
                np.array(scalability['sizes'], dtype=np.float64),
                np.array(scalability['distance_calls'], dtype=np.float64)
            ))

        return scalability

    def _fit_complexity(self, sizes: np.ndarray, costs: np.ndarray) -> Dict[str, Any]:
        """用线性、n log n和二次模型拟合代价曲线，返回R²最高的模型"""
        features = {
            'O(n)': sizes,
            'O(n log n)': sizes * np.log2(sizes + 1),
            'O(n^2)': sizes ** 2
        }

        fits = {}
        for model, x in features.items():
            coeff = np.polyfit(x, costs, 1)
            fits[model] = {
                'coeff': coeff.tolist(),
                'r2': self._calculate_r2(costs, np.polyval(coeff, x))
            }

        best_model = max(fits, key=lambda model: fits[model]['r2'])
        return {'fits': fits, 'best_fit': {'model': best_model, 'r2': fits[best_model]['r2']}}

    @staticmethod
    def _calculate_r2(y_true: np.ndarray, y_pred: np.ndarray) -> float:
        """计算R²分数"""
        ss_res = np.sum((y_true - y_pred) ** 2)
        ss_tot = np.sum((y_true - np.mean(y_true)) ** 2)
        return float(1 - ss_res / ss_tot) if ss_tot != 0 else 0.0

    def results_frame(self) -> pd.DataFrame:
        """所有基准测试结果"""
        return pd.DataFrame([asdict(result) for result in self.results])

    def save_results(self, test_name: str = 'comparison') -> Optional[Path]:
        """
        保存结果为CSV和JSON

        Returns:
            CSV文件路径，没有输出目录时返回None
        """
        if self.output_dir is None:
            return None

        df = self.results_frame()
        csv_path = self.output_dir / f'{test_name}.csv'
        json_path = self.output_dir / f'{test_name}.json'

        df.to_csv(csv_path, index=False)
        with open(json_path, 'w') as f:
            json.dump(df.to_dict('records'), f, indent=2, default=str)

        self._log(f"比较结果已保存到: {csv_path}, {json_path}")
        return csv_path

    def plot_comparison(self, test_name: str = 'comparison') -> Optional[plt.Figure]:
        """绘制耗时与距离计算次数的对比图"""
        df = self.results_frame()
        df = df[df['success']] if not df.empty else df
        if df.empty:
            self._log("没有比较数据可绘制")
            return None

        fig, (ax_time, ax_calls) = plt.subplots(1, 2, figsize=(12, 5))

        ax_time.bar(df['name'], df['execution_time'], color='steelblue')
        ax_time.set_title('执行时间')
        ax_time.set_ylabel('秒')
        ax_time.tick_params(axis='x', rotation=45)

        ax_calls.bar(df['name'], df['n_distance_calls'].fillna(0), color='darkorange')
        ax_calls.set_title('距离计算次数')
        ax_calls.tick_params(axis='x', rotation=45)

        plt.tight_layout()

        if self.output_dir:
            plot_path = self.output_dir / f'{test_name}.png'
            fig.savefig(plot_path, dpi=150)
            self._log(f"比较图表已保存到: {plot_path}")

        return fig
