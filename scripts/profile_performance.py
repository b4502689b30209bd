#!/usr/bin/env python3
"""
性能分析脚本
在一维有序数据上比较通用引擎与有序引擎
"""

import sys
from pathlib import Path

# 添加src目录到Python路径（未安装时也能运行）
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))

import argparse
import json
from typing import Optional, Sequence

from densityscan import DBSCANGeneral, DBSCANSorted, new_parameters
from densityscan.profiling import PerformanceAnalyzer, generate_1d_clusters


def main(argv: Optional[Sequence[str]] = None) -> int:
    """主函数"""
    parser = argparse.ArgumentParser(description='比较通用DBSCAN与有序DBSCAN的性能')
    parser.add_argument('--n-points', type=int, default=2000,
                        help='比较使用的数据点数（默认: 2000）')
    parser.add_argument('--sizes', type=int, nargs='+', default=[250, 500, 1000, 2000],
                        help='可扩展性测试的数据规模')
    parser.add_argument('--n-clusters', type=int, default=5,
                        help='生成数据的簇数量（默认: 5）')
    parser.add_argument('--eps', type=float, default=0.3,
                        help='邻域半径（默认: 0.3）')
    parser.add_argument('--min-points', type=int, default=5,
                        help='核心点的最少邻居数（默认: 5）')
    parser.add_argument('--seed', type=int, default=42,
                        help='随机种子（默认: 42）')
    parser.add_argument('--output-dir', type=str, default='./results/profiling',
                        help='输出目录（默认: ./results/profiling）')

    args = parser.parse_args(argv)

    try:
        params = new_parameters(args.eps, args.min_points)
        analyzer = PerformanceAnalyzer(output_dir=args.output_dir)

        print("=" * 60)
        print("引擎比较")
        print("=" * 60)
        data = generate_1d_clusters(args.n_points, n_clusters=args.n_clusters, seed=args.seed)
        comparison = analyzer.compare_engines(params, data)
        print(comparison[['name', 'execution_time', 'n_distance_calls', 'n_clusters', 'n_noise', 'agreement']])

        print("\n" + "=" * 60)
        print("可扩展性分析")
        print("=" * 60)

        def generator(size):
            return generate_1d_clusters(size, n_clusters=args.n_clusters, seed=args.seed)

        scalability = {
            'general': analyzer.analyze_scalability(
                'general',
                lambda counter: DBSCANGeneral(params, metric=counter, inclusive=True).classify,
                generator, args.sizes
            ),
            'sorted': analyzer.analyze_scalability(
                'sorted',
                lambda counter: DBSCANSorted(params, metric=counter).classify,
                generator, args.sizes
            )
        }

        for name, result in scalability.items():
            best_fit = result.get('best_fit')
            if best_fit:
                print(f"{name}: 距离计算次数最符合 {best_fit['model']} (R²={best_fit['r2']:.4f})")

        analyzer.save_results('engine_comparison')
        analyzer.plot_comparison('engine_comparison')

        scalability_file = Path(args.output_dir) / 'scalability.json'
        with open(scalability_file, 'w') as f:
            json.dump(scalability, f, indent=2, default=str, ensure_ascii=False)
        print(f"可扩展性结果已保存到: {scalability_file}")

    except Exception as e:
        print(f"错误: {e}")
        import traceback
        traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
