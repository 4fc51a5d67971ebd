"""日期归类工具：把任意日期文本归到月份/季度/季节"""
import re
from typing import List, Optional, Tuple

from procurement_analysis.constants import MONTHS, MONTH_TO_QUARTER, MONTH_TO_SEASON


# 按 Jan→Dec 顺序扫描，先命中先返回；全称包含缩写，列出仅为可读
ROMANIAN_MONTH_TOKENS: List[Tuple[str, Tuple[str, ...]]] = [
    ('Jan', ('ian', 'ianuarie')),
    ('Feb', ('feb', 'februarie')),
    ('Mar', ('mar', 'martie')),
    ('Apr', ('apr', 'aprilie')),
    ('May', ('mai',)),
    ('Jun', ('iun', 'iunie')),
    ('Jul', ('iul', 'iulie')),
    ('Aug', ('aug', 'august')),
    ('Sep', ('sep', 'septembrie')),
    ('Oct', ('oct', 'octombrie')),
    ('Nov', ('noi', 'noiembrie')),
    ('Dec', ('dec', 'decembrie')),
]

# 其余英文缩写（feb/mar/apr/aug/sep/oct/dec）已被罗马尼亚语扫描覆盖
ENGLISH_MONTH_TOKENS: List[Tuple[str, Tuple[str, ...]]] = [
    ('Jan', ('january', 'jan')),
    ('Feb', ('february',)),
    ('Mar', ('march',)),
    ('Apr', ('april',)),
    ('May', ('may',)),
    ('Jun', ('june', 'jun')),
    ('Jul', ('july', 'jul')),
    ('Aug', ('august',)),
    ('Sep', ('september',)),
    ('Oct', ('october',)),
    ('Nov', ('november', 'nov')),
    ('Dec', ('december',)),
]

NUMERIC_DATE_PATTERN = re.compile(r'\b([0-9]{1,4})[-/]([0-9]{1,4})[-/]([0-9]{1,4})\b')


class MonthClassifier:
    """月份归类器 - 支持罗马尼亚语/英语月份名与数字日期"""

    @staticmethod
    def classify_month(text: Optional[str]) -> Optional[str]:
        """
        从日期文本中识别月份，按以下顺序先命中先返回：
        - 罗马尼亚语月份名（如 "15 martie 2023"）
        - 英语月份名（如 "March 2023"）
        - 数字日期 D-M-Y / D/M/Y（如 "15/03/2023"、"03/15/2023"）

        数字日期默认取第二段为月份；第二段大于12且第一段不大于12时改取第一段。
        两段都不大于12时无法区分日/月，一律按第二段处理。

        Args:
            text: 日期文本

        Returns:
            月份缩写（Jan…Dec）或None
        """
        if not text:
            return None

        lower_text = str(text).lower()

        for tokens in (ROMANIAN_MONTH_TOKENS, ENGLISH_MONTH_TOKENS):
            for month, names in tokens:
                if any(name in lower_text for name in names):
                    return month

        match = NUMERIC_DATE_PATTERN.search(lower_text)
        if not match:
            return None

        try:
            first = int(match.group(1))
            second = int(match.group(2))
        except ValueError:
            return None

        month_number = second
        if second > 12 and first <= 12:
            month_number = first

        if 1 <= month_number <= 12:
            return MONTHS[month_number - 1]
        return None

    @classmethod
    def classify_quarter(cls, text: Optional[str]) -> Optional[str]:
        """日期文本 -> 季度标签（Q1…Q4）"""
        month = cls.classify_month(text)
        if month is None:
            return None
        return MONTH_TO_QUARTER[month]

    @classmethod
    def classify_season(cls, text: Optional[str]) -> Optional[str]:
        """日期文本 -> 季节标签（Spring/Summer/Autumn/Winter）"""
        month = cls.classify_month(text)
        if month is None:
            return None
        return MONTH_TO_SEASON[month]


classify_month = MonthClassifier.classify_month
classify_quarter = MonthClassifier.classify_quarter
classify_season = MonthClassifier.classify_season
