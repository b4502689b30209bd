"""
测试共享夹具
"""

import matplotlib

matplotlib.use('Agg')

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from densityscan import new_parameters
from densityscan.clustering.utils import absolute_distance


@pytest.fixture
def two_blob_points():
    """两个小簇加一个离群点的二维数据"""
    return np.array([
        [1.5, 2.2], [1.0, 1.1], [1.2, 1.4], [0.8, 1.0],
        [3.7, 4.0], [3.9, 3.9], [3.6, 4.1], [10.0, 10.0]
    ])


@pytest.fixture
def two_blob_params():
    return new_parameters(1.0, 3)


@pytest.fixture
def sorted_values():
    """两个紧密的一维簇，两端各有一个离群点"""
    return [0.3, 1.0, 1.2, 1.5, 3.6, 3.7, 3.9, 10.0]


@pytest.fixture
def sorted_params():
    return new_parameters(0.5, 3)


@pytest.fixture
def edge_vectors():
    """两个核心点各自带一个边界点的五维数据"""
    return np.array([
        [0.3311755015020835, 0.20474852214361858, 0.21050489388506638,
         0.23040992344219402, 0.023161159027037505],
        [0.5112445458548497, 0.1898442816540571, 0.11674072294944157,
         0.14853288499259437, 0.03363756454905728],
        [0.581134172697341, 0.15084733646825743, 0.09997992993087741,
         0.13580335513916678, 0.03223520576435743],
        [0.17210416043100868, 0.3403172702783598, 0.18218098373740396,
         0.2616980943829193, 0.04369949117030829],
    ])


@pytest.fixture
def abs_distance():
    return absolute_distance


@pytest.fixture
def three_groups():
    """三组相邻的一维数据（升序），第二组与两侧只隔着很窄的间隙"""
    return pd.read_csv(Path(__file__).parent / 'data' / 'three_groups.csv',
                       float_precision='round_trip')
