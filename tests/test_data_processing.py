"""
数据加载与预处理测试
"""

import numpy as np
import pandas as pd
import pytest

from densityscan import NOISE, DBSCANSorted, Label, new_parameters
from densityscan.data_processing import (
    drop_missing,
    labels_to_dataframe,
    load_labels_csv,
    load_points_csv,
    load_values_csv,
    prepare_sorted_input,
    restore_order,
    save_labels_csv,
    sort_values,
)


@pytest.fixture
def points_csv(tmp_path):
    path = tmp_path / 'points.csv'
    pd.DataFrame({
        'name': ['a', 'b', 'c', 'd'],
        'x': [0.0, 0.1, 5.0, 5.2],
        'y': [1.0, 1.1, 7.0, 7.1],
    }).to_csv(path, index=False)
    return path


class TestLoader:
    """CSV读写"""

    def test_load_numeric_columns(self, points_csv):
        points = load_points_csv(points_csv)
        assert points.shape == (4, 2)
        assert points.dtype == np.float64
        np.testing.assert_allclose(points[:, 0], [0.0, 0.1, 5.0, 5.2])

    def test_load_selected_columns(self, points_csv):
        points = load_points_csv(points_csv, columns=['y'], nrows=2)
        np.testing.assert_allclose(points, [[1.0], [1.1]])

    def test_missing_column(self, points_csv):
        with pytest.raises(ValueError, match="缺少列"):
            load_points_csv(points_csv, columns=['z'])

    def test_no_numeric_columns(self, tmp_path):
        path = tmp_path / 'text.csv'
        pd.DataFrame({'name': ['a', 'b']}).to_csv(path, index=False)
        with pytest.raises(ValueError):
            load_points_csv(path)

    def test_load_values(self, points_csv):
        np.testing.assert_allclose(load_values_csv(points_csv), [0.0, 0.1, 5.0, 5.2])
        np.testing.assert_allclose(load_values_csv(points_csv, 'y'), [1.0, 1.1, 7.0, 7.1])

    def test_labels_dataframe_columns(self):
        labels = [Label.core(0), Label.edge(0), NOISE]
        df = labels_to_dataframe([[0.0, 1.0], [0.5, 1.0], [9.0, 9.0]], labels)

        assert list(df.columns) == ['x0', 'x1', 'label', 'cluster_id']
        assert df['label'].tolist() == ['core', 'edge', 'noise']
        assert df['cluster_id'].tolist() == [0, 0, -1]

    def test_labels_dataframe_one_dimensional(self):
        df = labels_to_dataframe([1.0, 2.0], [Label.core(0), NOISE])
        assert list(df.columns) == ['value', 'label', 'cluster_id']

    def test_labels_dataframe_length_mismatch(self):
        with pytest.raises(ValueError):
            labels_to_dataframe([1.0, 2.0], [NOISE])

    def test_saved_labels_read_back(self, tmp_path):
        labels = [Label.core(0), Label.edge(0), NOISE, Label.core(1)]
        path = save_labels_csv(tmp_path / 'out' / 'labels', [0.0, 0.4, 3.0, 9.0], labels)

        assert path.suffix == '.csv'
        assert path.exists()
        assert load_labels_csv(path) == labels


class TestPreprocessor:
    """排序与还原"""

    def test_drop_missing_warns(self):
        with pytest.warns(UserWarning, match="缺失值"):
            valid, index = drop_missing([1.0, np.nan, 3.0])
        np.testing.assert_array_equal(valid, [1.0, 3.0])
        np.testing.assert_array_equal(index, [0, 2])

    def test_drop_missing_requires_1d(self):
        with pytest.raises(ValueError):
            drop_missing([[1.0, 2.0]])

    def test_sort_values_is_stable(self):
        values, order = sort_values([2.0, 1.0, 2.0, 0.0])
        np.testing.assert_array_equal(values, [0.0, 1.0, 2.0, 2.0])
        np.testing.assert_array_equal(order, [3, 1, 0, 2])

    def test_restore_order(self):
        labels = [Label.core(0), Label.core(0), NOISE]
        restored = restore_order(labels, np.array([2, 0, 1]))
        assert restored == [Label.core(0), NOISE, Label.core(0)]

    def test_restore_order_length_mismatch(self):
        with pytest.raises(ValueError):
            restore_order([NOISE], np.array([0, 1]))

    def test_unsorted_input_end_to_end(self):
        raw = np.array([3.7, 1.0, np.nan, 10.0, 1.2, 3.6, 0.3, 1.5, 3.9])
        with pytest.warns(UserWarning):
            values, order = prepare_sorted_input(raw)
        np.testing.assert_array_equal(values, [0.3, 1.0, 1.2, 1.5, 3.6, 3.7, 3.9, 10.0])

        labels, _ = DBSCANSorted(new_parameters(0.5, 3)).classify(values)
        restored = restore_order(labels, order, n_total=len(raw))

        assert len(restored) == len(raw)
        assert restored[2] == NOISE
        assert restored[1] == Label.core(0)
        assert restored[0] == Label.core(1)
        assert restored[6] == NOISE
