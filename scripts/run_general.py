#!/usr/bin/env python3
"""
运行通用DBSCAN聚类
任意维度的CSV数据，暴力邻域查询
"""

import sys
from pathlib import Path

# 添加src目录到Python路径（未安装时也能运行）
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))

import argparse
import json
from typing import Any, Dict, Optional, Sequence

import numpy as np

from densityscan import DBSCANGeneral, new_parameters
from densityscan.clustering.utils import METRICS
from densityscan.data_processing import load_points_csv, save_labels_csv
from densityscan.visualization import ClusterVisualizer


def run_general_dbscan(points: np.ndarray, eps: float, min_points: int,
                       metric: str = 'euclidean', inclusive: bool = False,
                       verify: bool = False) -> Dict[str, Any]:
    """
    运行通用DBSCAN

    Args:
        points: 点数据
        eps: 邻域半径
        min_points: 最小邻居数（包含自身）
        metric: 距离度量
        inclusive: 邻域是否包含距离恰好等于eps的点
        verify: 是否开启校验模式

    Returns:
        聚类结果和统计信息
    """
    print("=" * 60)
    print("运行通用DBSCAN聚类")
    print("=" * 60)
    print(f"算法参数:")
    print(f"  eps (邻域半径): {eps}")
    print(f"  min_points (最小邻居数): {min_points}")
    print(f"  metric (距离度量): {metric}")
    print(f"  边界: {'<=' if inclusive else '<'} eps")
    print(f"  数据点数量: {len(points)}")

    dbscan = DBSCANGeneral(new_parameters(eps, min_points), metric=metric,
                           inclusive=inclusive, verify=verify)
    dbscan.fit(points)
    stats = dbscan.get_cluster_stats()

    print(f"\n聚类结果:")
    print(f"  聚类数量: {stats['n_clusters']}")
    print(f"  核心点数量: {stats['n_core_points']}")
    print(f"  边界点数量: {stats['n_edge_points']}")
    print(f"  噪声点数量: {stats['n_noise']}")
    for label, size in list(stats['cluster_sizes'].items())[:10]:
        print(f"    聚类 {label}: {size} 个点")
    if len(stats['cluster_sizes']) > 10:
        print(f"    ... 还有 {len(stats['cluster_sizes']) - 10} 个聚类")
    print(f"  执行时间: {stats['execution_time']:.4f} 秒")

    return {
        'algorithm': 'DBSCAN_General',
        'parameters': {
            'eps': eps,
            'min_points': min_points,
            'metric': metric,
            'inclusive': inclusive,
            'n_points': len(points)
        },
        'results': stats,
        'cluster_count': dbscan.cluster_count_,
        'labels': dbscan.labels_
    }


def save_results(points: np.ndarray, result: Dict[str, Any], output_dir: str) -> None:
    """保存标签CSV和JSON摘要"""
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    labels_file = save_labels_csv(output_path / 'general_labels', points, result['labels'])

    summary_file = output_path / 'general_results.json'
    summary = {key: value for key, value in result.items() if key != 'labels'}
    with open(summary_file, 'w') as f:
        json.dump(summary, f, indent=2, default=str, ensure_ascii=False)

    print(f"标签已保存到: {labels_file}")
    print(f"摘要已保存到: {summary_file}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数"""
    parser = argparse.ArgumentParser(description='运行通用DBSCAN聚类算法')
    parser.add_argument('--data', type=str, required=True,
                        help='CSV数据文件（带表头）')
    parser.add_argument('--columns', type=str, nargs='+',
                        help='参与聚类的列名（默认: 所有数值列）')
    parser.add_argument('--eps', type=float, default=1.0,
                        help='邻域半径（默认: 1.0）')
    parser.add_argument('--min-points', type=int, default=5,
                        help='核心点的最少邻居数，包含自身（默认: 5）')
    parser.add_argument('--metric', type=str, default='euclidean',
                        choices=sorted(METRICS),
                        help='距离度量方式（默认: euclidean）')
    parser.add_argument('--inclusive', action='store_true',
                        help='邻域包含距离恰好等于eps的点')
    parser.add_argument('--verify', action='store_true',
                        help='校验距离函数的确定性和对称性（O(n²)）')
    parser.add_argument('--output-dir', type=str, default='./results/general',
                        help='输出目录（默认: ./results/general）')
    parser.add_argument('--no-visualize', action='store_true',
                        help='不生成可视化图表')

    args = parser.parse_args(argv)

    try:
        points = load_points_csv(args.data, args.columns)
        result = run_general_dbscan(points, args.eps, args.min_points, args.metric,
                                    args.inclusive, args.verify)
        save_results(points, result, args.output_dir)

        if not args.no_visualize and points.shape[1] == 2:
            visualizer = ClusterVisualizer()
            visualizer.plot_clusters_2d(
                points, result['labels'],
                title=f"通用DBSCAN聚类结果 (eps={args.eps}, min_points={args.min_points})",
                save_path=str(Path(args.output_dir) / 'general_clusters_2d.png')
            )

    except Exception as e:
        print(f"错误: {e}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
