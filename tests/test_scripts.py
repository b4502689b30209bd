"""
命令行脚本测试
"""

import importlib.util
import json
from pathlib import Path

import pandas as pd
import pytest

SCRIPTS_DIR = Path(__file__).parent.parent / 'scripts'


def _load_script(name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / f'{name}.py')
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def values_csv(tmp_path):
    path = tmp_path / 'values.csv'
    pd.DataFrame({'v': [3.7, 1.0, 10.0, 1.2, 3.6, 0.3, 1.5, 3.9]}).to_csv(path, index=False)
    return path


class TestRunSorted:

    def test_unsorted_input_fails_without_sort(self, values_csv, tmp_path, capsys):
        run_sorted = _load_script('run_sorted')
        code = run_sorted.main(['--data', str(values_csv), '--eps', '0.5', '--min-points', '3',
                                '--output-dir', str(tmp_path / 'out'), '--no-visualize'])

        assert code == 1
        assert '--sort' in capsys.readouterr().out

    def test_sort_restores_original_order(self, values_csv, tmp_path):
        run_sorted = _load_script('run_sorted')
        out_dir = tmp_path / 'out'
        code = run_sorted.main(['--data', str(values_csv), '--eps', '0.5', '--min-points', '3',
                                '--sort', '--output-dir', str(out_dir), '--no-visualize'])

        assert code == 0
        df = pd.read_csv(out_dir / 'sorted_labels.csv')
        assert df['value'].tolist() == [3.7, 1.0, 10.0, 1.2, 3.6, 0.3, 1.5, 3.9]
        assert df['cluster_id'].tolist() == [1, 0, -1, 0, 1, -1, 0, 1]

        with open(out_dir / 'sorted_results.json') as f:
            summary = json.load(f)
        assert summary['cluster_count'] == 1


class TestRunGeneral:

    def test_two_dimensional_run(self, tmp_path):
        data_path = tmp_path / 'points.csv'
        pd.DataFrame({
            'x': [1.5, 1.0, 1.2, 0.8, 3.7, 3.9, 3.6, 10.0],
            'y': [2.2, 1.1, 1.4, 1.0, 4.0, 3.9, 4.1, 10.0],
        }).to_csv(data_path, index=False)
        out_dir = tmp_path / 'out'

        run_general = _load_script('run_general')
        code = run_general.main(['--data', str(data_path), '--eps', '1.0', '--min-points', '3',
                                 '--output-dir', str(out_dir)])

        assert code == 0
        df = pd.read_csv(out_dir / 'general_labels.csv')
        assert df['label'].tolist() == ['edge', 'core', 'core', 'core', 'core', 'core', 'core', 'noise']
        assert (out_dir / 'general_clusters_2d.png').exists()

    def test_missing_file(self, tmp_path):
        run_general = _load_script('run_general')
        code = run_general.main(['--data', str(tmp_path / 'missing.csv'), '--no-visualize',
                                 '--output-dir', str(tmp_path / 'out')])
        assert code == 1
