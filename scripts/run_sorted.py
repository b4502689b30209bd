#!/usr/bin/env python3
"""
运行有序一维DBSCAN聚类
输入需升序排列；--sort 时先排序再把标签映射回原始顺序
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

from densityscan import DBSCANSorted, DataIsNotSorted, new_parameters
from densityscan.data_processing import (load_values_csv, prepare_sorted_input,
                                         restore_order, save_labels_csv)
from densityscan.visualization import ClusterVisualizer


def run_sorted_dbscan(values: np.ndarray, eps: float, min_points: int,
                      inclusive: bool = True, unchecked: bool = False) -> Dict[str, Any]:
    """
    运行有序DBSCAN

    Args:
        values: 升序排列的一维数据
        eps: 邻域半径
        min_points: 最小邻居数（包含自身）
        inclusive: 邻域是否包含距离恰好等于eps的点
        unchecked: 跳过有序性检查

    Returns:
        聚类结果和统计信息
    """
    print("=" * 60)
    print("运行有序DBSCAN聚类")
    print("=" * 60)
    print(f"算法参数:")
    print(f"  eps (邻域半径): {eps}")
    print(f"  min_points (最小邻居数): {min_points}")
    print(f"  边界: {'<=' if inclusive else '<'} eps")
    print(f"  有序性检查: {'跳过' if unchecked else '开启'}")
    print(f"  数据点数量: {len(values)}")

    dbscan = DBSCANSorted(new_parameters(eps, min_points), inclusive=inclusive)
    dbscan.fit(values, check_sorted=not unchecked)
    stats = dbscan.get_cluster_stats()

    print(f"\n聚类结果:")
    print(f"  聚类数量: {stats['n_clusters']}")
    print(f"  核心点数量: {stats['n_core_points']}")
    print(f"  噪声点数量: {stats['n_noise']}")
    print(f"  执行时间: {stats['execution_time']:.4f} 秒")

    return {
        'algorithm': 'DBSCAN_Sorted',
        'parameters': {
            'eps': eps,
            'min_points': min_points,
            'inclusive': inclusive,
            'unchecked': unchecked,
            'n_points': len(values)
        },
        'results': stats,
        'cluster_count': dbscan.cluster_count_,
        'labels': dbscan.labels_
    }


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数"""
    parser = argparse.ArgumentParser(description='运行有序一维DBSCAN聚类算法')
    parser.add_argument('--data', type=str, required=True,
                        help='CSV数据文件（带表头）')
    parser.add_argument('--column', type=str,
                        help='数据列名（默认: 第一个数值列）')
    parser.add_argument('--eps', type=float, default=0.5,
                        help='邻域半径（默认: 0.5）')
    parser.add_argument('--min-points', type=int, default=5,
                        help='核心点的最少邻居数，包含自身（默认: 5）')
    parser.add_argument('--exclusive', action='store_true',
                        help='邻域不包含距离恰好等于eps的点')
    parser.add_argument('--sort', action='store_true',
                        help='先去除缺失值并排序，输出按原始顺序')
    parser.add_argument('--unchecked', action='store_true',
                        help='跳过有序性检查（数据无序时结果无定义）')
    parser.add_argument('--output-dir', type=str, default='./results/sorted',
                        help='输出目录（默认: ./results/sorted）')
    parser.add_argument('--no-visualize', action='store_true',
                        help='不生成可视化图表')

    args = parser.parse_args(argv)

    try:
        raw_values = load_values_csv(args.data, args.column)
        if args.sort:
            values, order = prepare_sorted_input(raw_values)
        else:
            values, order = raw_values, None

        result = run_sorted_dbscan(values, args.eps, args.min_points,
                                   inclusive=not args.exclusive, unchecked=args.unchecked)

        output_path = Path(args.output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        if not args.no_visualize:
            visualizer = ClusterVisualizer()
            visualizer.plot_clusters_1d(
                values, result['labels'],
                title=f"有序DBSCAN聚类结果 (eps={args.eps}, min_points={args.min_points})",
                save_path=str(output_path / 'sorted_clusters_1d.png')
            )

        if order is not None:
            labels = restore_order(result['labels'], order, n_total=len(raw_values))
        else:
            labels = result['labels']
        labels_file = save_labels_csv(output_path / 'sorted_labels', raw_values, labels)

        summary_file = output_path / 'sorted_results.json'
        summary = {key: value for key, value in result.items() if key != 'labels'}
        with open(summary_file, 'w') as f:
            json.dump(summary, f, indent=2, default=str, ensure_ascii=False)

        print(f"标签已保存到: {labels_file}")
        print(f"摘要已保存到: {summary_file}")

    except DataIsNotSorted as e:
        print(f"错误: {e}（可使用 --sort 先排序）")
        return 1

    except Exception as e:
        print(f"错误: {e}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
