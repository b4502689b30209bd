"""
参数模型与标签模型测试
"""

import dataclasses

import numpy as np
import pytest

from densityscan import NOISE, DBSCANParams, Label, LabelKind, cluster_stats, labels_to_array, new_parameters


class TestParams:
    """DBSCAN参数"""

    def test_new_parameters_stores_values(self):
        params = new_parameters(0.5, 4)
        assert params.epsilon == 0.5
        assert params.min_points == 4

    def test_params_are_immutable(self):
        params = new_parameters(0.5, 4)
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.min_points = 10

    def test_epsilon_accepts_any_comparable(self):
        """epsilon只需与距离值可比较"""
        params = DBSCANParams(epsilon=3, min_points=1)
        assert params.epsilon == 3

    @pytest.mark.parametrize("min_points", [0, -1])
    def test_min_points_below_one_rejected(self, min_points):
        with pytest.raises(ValueError):
            new_parameters(1.0, min_points)

    @pytest.mark.parametrize("min_points", [2.0, True, "3"])
    def test_min_points_must_be_int(self, min_points):
        with pytest.raises(ValueError):
            new_parameters(1.0, min_points)


class TestLabels:
    """分类标签"""

    def test_noise_has_no_cluster(self):
        assert NOISE.is_noise
        assert NOISE.cluster_id is None
        assert NOISE == Label()

    def test_core_and_edge_constructors(self):
        core = Label.core(2)
        edge = Label.edge(2)
        assert core.kind is LabelKind.CORE and core.cluster_id == 2
        assert edge.kind is LabelKind.EDGE and edge.cluster_id == 2
        assert core != edge
        assert core == Label.core(2)

    def test_repr(self):
        assert repr(Label.core(0)) == 'Core(0)'
        assert repr(Label.edge(3)) == 'Edge(3)'
        assert repr(NOISE) == 'Noise'

    def test_labels_to_array(self):
        labels = [Label.core(0), Label.edge(0), NOISE, Label.core(1)]
        np.testing.assert_array_equal(labels_to_array(labels), [0, 0, -1, 1])
        assert labels_to_array(labels).dtype == np.int32

    def test_cluster_stats(self):
        labels = [Label.core(0), Label.edge(0), NOISE, Label.core(1), Label.core(1), NOISE]
        stats = cluster_stats(labels)
        assert stats['n_clusters'] == 2
        assert stats['n_core_points'] == 3
        assert stats['n_edge_points'] == 1
        assert stats['n_noise'] == 2
        assert stats['cluster_sizes'] == {0: 2, 1: 2}

    def test_cluster_stats_empty(self):
        stats = cluster_stats([])
        assert stats['n_clusters'] == 0
        assert stats['cluster_sizes'] == {}
