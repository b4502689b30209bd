"""
聚类工具函数
距离度量、邻域判定、有序性校验和调用约定检查
"""

from math import radians, sin, cos, sqrt, atan2
from typing import Any, Callable, Iterable, List, Optional, Sequence, Union

from scipy.spatial import distance as scipy_distance

from .exceptions import DistanceContractError
from .labels import DataIdx

DistanceFn = Callable[[Any, Any], Any]

# 地球平均半径（米）
EARTH_RADIUS_M = 6371000.0


def absolute_distance(a: Any, b: Any) -> Any:
    """一维标量距离 |a - b|"""
    return abs(a - b)


def haversine_distance(point1: Sequence[float], point2: Sequence[float]) -> float:
    """
    Haversine距离，适用于地理坐标

    Args:
        point1: 第一个点 [lat, lon]（十进制度数）
        point2: 第二个点 [lat, lon]

    Returns:
        两点之间的距离（米）
    """
    lat1, lon1 = radians(point1[0]), radians(point1[1])
    lat2, lon2 = radians(point2[0]), radians(point2[1])

    dlon = lon2 - lon1
    dlat = lat2 - lat1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return EARTH_RADIUS_M * c


METRICS = {
    'absolute': absolute_distance,
    'euclidean': scipy_distance.euclidean,
    'cityblock': scipy_distance.cityblock,
    'chebyshev': scipy_distance.chebyshev,
    'cosine': scipy_distance.cosine,
    'haversine': haversine_distance,
}


def get_metric(metric: Union[str, DistanceFn]) -> DistanceFn:
    """
    解析距离度量

    Args:
        metric: 度量名称或距离函数

    Returns:
        距离函数
    """
    if callable(metric):
        return metric
    try:
        return METRICS[metric]
    except KeyError:
        raise ValueError(f"不支持的度量方式: {metric}") from None


def within_epsilon(distance: Any, epsilon: Any, inclusive: bool) -> bool:
    """
    判断距离是否在邻域内

    比较结果不可比（例如NaN）时视为不在邻域内。

    Args:
        distance: 距离值
        epsilon: 邻域半径
        inclusive: True时使用 <=，否则使用 <

    Returns:
        是否在邻域内
    """
    if inclusive:
        return bool(distance <= epsilon)
    return bool(distance < epsilon)


def region_query(data: Sequence[Any], sample: Any, distance: DistanceFn,
                 epsilon: Any, inclusive: bool = False) -> List[DataIdx]:
    """
    暴力查找邻域内的所有点（包含自身）

    Args:
        data: 所有数据
        sample: 目标数据
        distance: 距离函数
        epsilon: 邻域半径
        inclusive: 是否包含距离恰好等于epsilon的点

    Returns:
        邻域内点的下标列表
    """
    return [
        DataIdx(i) for i, point in enumerate(data)
        if within_epsilon(distance(sample, point), epsilon, inclusive)
    ]


def first_unsorted_position(data: Iterable[Any],
                            compare: Optional[Callable[[Any, Any], Optional[int]]] = None) -> Optional[int]:
    """
    查找第一个逆序（或不可比较）的相邻元素对

    Args:
        data: 输入序列
        compare: 比较函数，返回负数/0/正数，不可比较时返回None；
            为None时使用 a <= b

    Returns:
        逆序对中前一个元素的位置，序列有序时返回None
    """
    iterator = iter(data)
    try:
        previous = next(iterator)
    except StopIteration:
        return None

    for position, current in enumerate(iterator):
        if compare is None:
            in_order = bool(previous <= current)
        else:
            order = compare(previous, current)
            in_order = order is not None and order <= 0
        if not in_order:
            return position
        previous = current

    return None


def is_sorted(data: Iterable[Any],
              compare: Optional[Callable[[Any, Any], Optional[int]]] = None) -> bool:
    """检查序列是否非降序排列（空序列和单元素序列视为有序）"""
    return first_unsorted_position(data, compare) is None


def _same_distance(d1: Any, d2: Any) -> bool:
    """比较两次距离计算结果，NaN与NaN视为相同"""
    if d1 != d1 and d2 != d2:
        return True
    return bool(d1 == d2)


def check_distance_contract(data: Sequence[Any], distance: DistanceFn) -> None:
    """
    检查距离函数的确定性和对称性（校验模式，O(n²)）

    Args:
        data: 输入数据
        distance: 距离函数

    Raises:
        DistanceContractError: 距离函数不确定或不对称
    """
    n_samples = len(data)
    for i in range(n_samples):
        for j in range(i, n_samples):
            forward = distance(data[i], data[j])
            if not _same_distance(forward, distance(data[i], data[j])):
                raise DistanceContractError(f"距离函数不确定: 位置 ({i}, {j})")
            if not _same_distance(forward, distance(data[j], data[i])):
                raise DistanceContractError(f"距离函数不对称: 位置 ({i}, {j})")
