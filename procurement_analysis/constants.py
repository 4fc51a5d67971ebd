"""
分析常量集中管理
月份/季度/季节标签、金额区间、报表版式与判定阈值
"""
from typing import Dict, List, Tuple


# ==================== 时间维度标签 ====================

MONTHS: List[str] = [
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
]

QUARTERS: Dict[str, Tuple[str, str, str]] = {
    'Q1': ('Jan', 'Feb', 'Mar'),
    'Q2': ('Apr', 'May', 'Jun'),
    'Q3': ('Jul', 'Aug', 'Sep'),
    'Q4': ('Oct', 'Nov', 'Dec'),
}

# 冬季跨年：Dec, Jan, Feb
SEASONS: Dict[str, Tuple[str, str, str]] = {
    'Spring': ('Mar', 'Apr', 'May'),
    'Summer': ('Jun', 'Jul', 'Aug'),
    'Autumn': ('Sep', 'Oct', 'Nov'),
    'Winter': ('Dec', 'Jan', 'Feb'),
}

MONTH_TO_QUARTER: Dict[str, str] = {
    month: quarter for quarter, months in QUARTERS.items() for month in months
}

MONTH_TO_SEASON: Dict[str, str] = {
    month: season for season, months in SEASONS.items() for month in months
}


# ==================== 金额区间（不含税金额） ====================

# (标签, 下限含, 上限不含)；None 表示无上限
VALUE_RANGES: List[Tuple[str, float, float]] = [
    ('0-10,000', 0, 10000),
    ('10,000-50,000', 10000, 50000),
    ('50,000-100,000', 50000, 100000),
    ('100,000+', 100000, None),
]


# ==================== 报表版式 ====================

CURRENCY = 'RON'
UNKNOWN_LABEL = 'Unknown'
REPORT_TITLE = 'PROCUREMENT DATA ANALYSIS'
BANNER_RULE = '=' * 50
SECTION_RULE = '-' * 50

TOP_CATEGORIES_LIMIT = 10
TOP_ITEMS_LIMIT = 5


# ==================== 判定阈值（固定设计常量，不开放配置） ====================

# 有效日期占比下限（%）：只看是否有日期文本，不看能否解析
TIME_DATA_MIN_PERCENT = 20

MONTHLY_CV_HIGH = 50
MONTHLY_CV_MODERATE = 25

SEASONAL_CV_EXCELLENT = 15
SEASONAL_CV_GOOD = 30
SEASONAL_CV_MODERATE = 50

PEAK_MONTH_WARNING_SHARE = 25

GENERAL_RECOMMENDATIONS: List[str] = [
    'Implement category management approach for major spend areas',
    'Develop strategic supplier relationships for critical items',
    'Consider e-procurement tools to streamline processes',
    'Enhance procurement data quality and analysis capabilities',
    'Establish regular procurement performance reviews',
]
