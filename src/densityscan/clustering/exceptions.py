"""
聚类模块的异常类型
"""

from typing import Optional


class DensityScanError(Exception):
    """所有densityscan异常的基类"""
    pass


class DataIsNotSorted(DensityScanError, ValueError):
    """输入数据不是升序排列（排序引擎的前置条件不满足）"""

    def __init__(self, position: Optional[int] = None):
        self.position = position
        if position is None:
            message = "输入数据不是升序排列"
        else:
            message = f"输入数据不是升序排列: 位置 {position} 与 {position + 1} 逆序或不可比较"
        super().__init__(message)


class DistanceContractError(DensityScanError, ValueError):
    """距离函数或输入数据违反调用约定（仅在校验模式下检查）"""
    pass
