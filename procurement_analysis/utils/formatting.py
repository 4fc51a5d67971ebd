"""
报表格式化辅助方法（仅内部复用）：
- 安全百分比计算
- 千分位金额格式
"""
from __future__ import annotations


def safe_ratio(part: float, total: float) -> float:
    """安全比率：当 total<=0 返回 0。"""
    if not total or total <= 0:
        return 0.0
    return part / total


def percent(part: float, total: float) -> float:
    """百分比（0-100），当 total<=0 返回 0。不做四舍五入，由格式串控制精度。"""
    return safe_ratio(part, total) * 100


def format_money(value: float) -> str:
    """千分位 + 两位小数，例如 1234567.891 -> '1,234,567.89'"""
    return f'{value:,.2f}'
