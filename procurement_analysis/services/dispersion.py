"""
离散度分析服务

变异系数（CV）用于判断月度/季节分布是否均衡。
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from procurement_analysis.constants import (
    MONTHLY_CV_HIGH, MONTHLY_CV_MODERATE,
    SEASONAL_CV_EXCELLENT, SEASONAL_CV_GOOD, SEASONAL_CV_MODERATE,
)


@dataclass(frozen=True)
class DispersionResult:
    mean: float
    stddev: float
    coefficient_of_variation: float


def analyze(values: Sequence[float], divisor_count: int) -> Optional[DispersionResult]:
    """
    计算均值、标准差与变异系数

    均值 = 全部桶合计 / divisor_count；
    方差只统计金额>0的"活跃"桶，除数为活跃桶数量（零值月份/季节不拉低离散度）。

    Args:
        values: 各桶金额
        divisor_count: 均值除数（月度为12，季节为4）

    Returns:
        DispersionResult；活跃桶少于2个或均值为0时返回None
    """
    if divisor_count <= 0:
        return None

    active = [value for value in values if value > 0]
    if len(active) < 2:
        return None

    mean = sum(values) / divisor_count
    if mean <= 0:
        return None

    variance = sum((value - mean) ** 2 for value in active) / len(active)
    stddev = math.sqrt(variance)
    return DispersionResult(
        mean=mean,
        stddev=stddev,
        coefficient_of_variation=stddev / mean * 100,
    )


def classify_monthly_variability(coefficient_of_variation: float) -> str:
    """月度波动判定：>50% HIGH，>25% MODERATE，其余 LOW"""
    if coefficient_of_variation > MONTHLY_CV_HIGH:
        return 'HIGH'
    if coefficient_of_variation > MONTHLY_CV_MODERATE:
        return 'MODERATE'
    return 'LOW'


def classify_seasonal_balance(coefficient_of_variation: float) -> str:
    """季节均衡判定：<15% EXCELLENT，<30% GOOD，<50% MODERATE，其余 HIGH"""
    if coefficient_of_variation < SEASONAL_CV_EXCELLENT:
        return 'EXCELLENT'
    if coefficient_of_variation < SEASONAL_CV_GOOD:
        return 'GOOD'
    if coefficient_of_variation < SEASONAL_CV_MODERATE:
        return 'MODERATE'
    return 'HIGH'
