"""金额解析工具"""
import math
import re
from typing import Any


class AmountParser:
    """金额解析器 - 兼容 1,234.56 与 1.234,56 两种写法"""

    @staticmethod
    def parse_amount(raw_value: Any) -> float:
        """
        解析金额单元格，无法解析或非有限值时返回 0.0，负数按 0.0 处理

        Args:
            raw_value: 单元格原始值（数字或字符串）

        Returns:
            float金额
        """
        if raw_value is None:
            return 0.0

        if isinstance(raw_value, (int, float)):
            if isinstance(raw_value, float) and not math.isfinite(raw_value):
                return 0.0
            return max(float(raw_value), 0.0)

        # 去掉货币符号、单位与空白，只保留数字和分隔符
        cleaned = re.sub(r'[^0-9.,\-]', '', str(raw_value))
        if not cleaned:
            return 0.0

        if ',' in cleaned and '.' in cleaned:
            # 最后出现的分隔符视为小数点
            if cleaned.rfind(',') > cleaned.rfind('.'):
                cleaned = cleaned.replace('.', '').replace(',', '.')
            else:
                cleaned = cleaned.replace(',', '')
        elif cleaned.count(',') > 1:
            cleaned = cleaned.replace(',', '')
        elif ',' in cleaned:
            cleaned = cleaned.replace(',', '.')
        elif cleaned.count('.') > 1:
            cleaned = cleaned.replace('.', '')

        try:
            value = float(cleaned)
        except ValueError:
            return 0.0

        if not math.isfinite(value):
            return 0.0
        return max(value, 0.0)
