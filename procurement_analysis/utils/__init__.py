"""
分析工具模块
"""
from .amount_parser import AmountParser
from .cpv_parser import CpvParser
from .date_parser import MonthClassifier, classify_month, classify_quarter, classify_season

__all__ = [
    'AmountParser',
    'CpvParser',
    'MonthClassifier',
    'classify_month',
    'classify_quarter',
    'classify_season',
]
