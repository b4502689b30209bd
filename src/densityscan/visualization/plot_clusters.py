"""
聚类结果可视化
一维/二维数据的核心点、边界点和噪声点绘图
"""

from typing import Optional, Sequence, Tuple

import matplotlib

matplotlib.use('Agg')  # 非交互式后端
import matplotlib.pyplot as plt
import numpy as np
from scipy.spatial import ConvexHull, QhullError

from ..clustering.labels import Label, LabelKind, cluster_stats, labels_to_array

# 每类标签的绘制样式：(标记, 大小倍数, 透明度倍数)
_KIND_STYLE = {
    LabelKind.CORE: ('o', 1.0, 1.0),
    LabelKind.EDGE: ('^', 0.8, 0.8),
}


class ClusterVisualizer:
    """聚类可视化器"""

    def __init__(self, figsize: Tuple[int, int] = (12, 8),
                 colormap: str = 'tab20'):
        """
        初始化可视化器

        Args:
            figsize: 图形大小
            colormap: 颜色映射
        """
        self.figsize = figsize
        self.colormap = colormap
        self.cmap = matplotlib.colormaps[colormap]

    def _cluster_colors(self, cluster_ids: np.ndarray) -> dict:
        unique_ids = np.unique(cluster_ids[cluster_ids >= 0])
        if len(unique_ids) == 0:
            return {}
        colors = self.cmap(np.linspace(0, 1, len(unique_ids)))
        return {int(cid): colors[i] for i, cid in enumerate(unique_ids)}

    def _add_stats_text(self, ax, labels: Sequence[Label]) -> None:
        stats = cluster_stats(labels)
        stats_text = (f"聚类数: {stats['n_clusters']}\n"
                      f"核心点: {stats['n_core_points']}\n"
                      f"边界点: {stats['n_edge_points']}\n"
                      f"噪声点: {stats['n_noise']}")
        ax.text(0.02, 0.98, stats_text, transform=ax.transAxes,
                fontsize=10, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.8))

    def _finish(self, fig: plt.Figure, ax, title: str, save_path: Optional[str]) -> plt.Figure:
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.grid(True, alpha=0.3)

        handles, legend_labels = ax.get_legend_handles_labels()
        if handles:
            ax.legend(handles[:15], legend_labels[:15], loc='upper right', fontsize=8)

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"聚类图已保存到: {save_path}")

        return fig

    def plot_clusters_2d(self, points: np.ndarray, labels: Sequence[Label],
                         title: str = "DBSCAN聚类结果",
                         save_path: Optional[str] = None,
                         show_noise: bool = True,
                         draw_hull: bool = True,
                         s: float = 20.0) -> plt.Figure:
        """
        绘制二维聚类结果

        Args:
            points: 点数据，形状为(n, 2)
            labels: 标签序列
            title: 图表标题
            save_path: 保存路径
            show_noise: 是否显示噪声点
            draw_hull: 是否为簇绘制凸包
            s: 点的大小

        Returns:
            matplotlib图形对象
        """
        points = np.asarray(points, dtype=np.float64)
        if points.ndim != 2 or points.shape[1] != 2:
            raise ValueError(f"需要形状为(n, 2)的点数据，实际: {points.shape}")

        cluster_ids = labels_to_array(labels)
        kinds = np.array([label.kind for label in labels], dtype=object)
        colors = self._cluster_colors(cluster_ids)

        fig, ax = plt.subplots(figsize=self.figsize)

        for cid, color in colors.items():
            in_cluster = cluster_ids == cid
            for kind, (marker, size_scale, alpha_scale) in _KIND_STYLE.items():
                mask = in_cluster & (kinds == kind)
                if not np.any(mask):
                    continue
                ax.scatter(points[mask, 0], points[mask, 1], c=[color], marker=marker,
                           s=s * size_scale, alpha=0.8 * alpha_scale,
                           label=f'聚类 {cid} ({kind.value})', edgecolors='w', linewidths=0.5)

            cluster_points = points[in_cluster]
            if draw_hull and len(cluster_points) > 3:
                try:
                    hull = ConvexHull(cluster_points)
                except QhullError:
                    # 共线等退化情况没有凸包
                    continue
                hull_points = cluster_points[np.append(hull.vertices, hull.vertices[0])]
                ax.plot(hull_points[:, 0], hull_points[:, 1],
                        color=color, alpha=0.3, linewidth=1, linestyle='--')

        noise_mask = cluster_ids < 0
        if show_noise and np.any(noise_mask):
            ax.scatter(points[noise_mask, 0], points[noise_mask, 1], c='gray', marker='x',
                       s=s * 0.5, alpha=0.4, label='噪声点')

        ax.set_xlabel('X坐标')
        ax.set_ylabel('Y坐标')
        self._add_stats_text(ax, labels)

        return self._finish(fig, ax, title, save_path)

    def plot_clusters_1d(self, values: Sequence[float], labels: Sequence[Label],
                         title: str = "一维DBSCAN聚类结果",
                         save_path: Optional[str] = None,
                         show_noise: bool = True,
                         s: float = 20.0) -> plt.Figure:
        """
        绘制一维聚类结果（横轴为数值，纵轴为数据下标）

        Args:
            values: 一维数据
            labels: 标签序列
            title: 图表标题
            save_path: 保存路径
            show_noise: 是否显示噪声点
            s: 点的大小

        Returns:
            matplotlib图形对象
        """
        values = np.asarray(values, dtype=np.float64)
        positions = np.arange(len(values))
        cluster_ids = labels_to_array(labels)
        kinds = np.array([label.kind for label in labels], dtype=object)
        colors = self._cluster_colors(cluster_ids)

        fig, ax = plt.subplots(figsize=self.figsize)

        for cid, color in colors.items():
            in_cluster = cluster_ids == cid
            for kind, (marker, size_scale, alpha_scale) in _KIND_STYLE.items():
                mask = in_cluster & (kinds == kind)
                if np.any(mask):
                    ax.scatter(values[mask], positions[mask], c=[color], marker=marker,
                               s=s * size_scale, alpha=0.8 * alpha_scale,
                               label=f'聚类 {cid} ({kind.value})')
            ax.axvspan(values[in_cluster].min(), values[in_cluster].max(),
                       color=color, alpha=0.1)

        noise_mask = cluster_ids < 0
        if show_noise and np.any(noise_mask):
            ax.scatter(values[noise_mask], positions[noise_mask], c='gray', marker='x',
                       s=s * 0.5, alpha=0.4, label='噪声点')

        ax.set_xlabel('数值')
        ax.set_ylabel('数据下标')
        self._add_stats_text(ax, labels)

        return self._finish(fig, ax, title, save_path)

    def plot_cluster_sizes(self, labels: Sequence[Label],
                           title: str = "聚类大小分布",
                           save_path: Optional[str] = None) -> plt.Figure:
        """绘制每个簇的核心点与边界点数量"""
        cluster_ids = labels_to_array(labels)
        kinds = np.array([label.kind for label in labels], dtype=object)
        unique_ids = np.unique(cluster_ids[cluster_ids >= 0])

        core_counts = [int(np.sum((cluster_ids == cid) & (kinds == LabelKind.CORE))) for cid in unique_ids]
        edge_counts = [int(np.sum((cluster_ids == cid) & (kinds == LabelKind.EDGE))) for cid in unique_ids]

        fig, ax = plt.subplots(figsize=self.figsize)
        x = np.arange(len(unique_ids))
        ax.bar(x, core_counts, color='steelblue', label='核心点')
        ax.bar(x, edge_counts, bottom=core_counts, color='darkorange', label='边界点')
        ax.set_xticks(x)
        ax.set_xticklabels([str(cid) for cid in unique_ids])
        ax.set_xlabel('聚类ID')
        ax.set_ylabel('点数')

        return self._finish(fig, ax, title, save_path)
