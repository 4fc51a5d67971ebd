"""CPV编码解析工具"""
import re
from typing import List, Optional


CPV_CODE_PATTERN = re.compile(r'\d{8}-\d')
CPV_CODE_PATTERN_SIMPLE = re.compile(r'\d{8}')


class CpvParser:
    """CPV编码提取器"""

    @staticmethod
    def extract_codes(cpv_text: Optional[str]) -> List[str]:
        """
        从CPV单元格文本中提取全部编码

        优先匹配带校验位的 "45000000-7"；一个都没有时退回匹配8位数字并补 "-0"。

        Args:
            cpv_text: CPV单元格原文，如 "45000000-7 Lucrari de constructii"

        Returns:
            编码列表（保持出现顺序）
        """
        if not cpv_text or not str(cpv_text).strip():
            return []

        codes = CPV_CODE_PATTERN.findall(str(cpv_text))
        if codes:
            return codes

        return [f'{code}-0' for code in CPV_CODE_PATTERN_SIMPLE.findall(str(cpv_text))]

    @staticmethod
    def division(code: Optional[str]) -> str:
        """CPV大类：编码前两位"""
        if code and len(code) >= 2:
            return code[:2]
        return ''

    @classmethod
    def category_code(cls, cpv_text: Optional[str]) -> str:
        """取首个CPV编码的大类作为记录的分类编码，无编码返回空串"""
        codes = cls.extract_codes(cpv_text)
        if not codes:
            return ''
        return cls.division(codes[0])
