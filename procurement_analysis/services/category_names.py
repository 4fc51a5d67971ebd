"""CPV分类名称解析"""
from typing import Mapping, Optional

from procurement_analysis.constants import UNKNOWN_LABEL
from procurement_analysis.records import CategoryEntry


def resolve_name(code: Optional[str], reference_table: Mapping[str, CategoryEntry]) -> str:
    """
    分类编码 -> 名称（前缀匹配）

    查询编码作为参照编码的前缀进行匹配（宽泛编码可命中具体编码，如 "45" 命中 "45210000-2"）。
    按参照表自身的迭代顺序线性扫描：优先返回第一个有本地语言名称的匹配项，
    其次第一个有英文名称的匹配项，都没有则返回 "Category {code}"。

    Args:
        code: 分类编码
        reference_table: 编码 -> CategoryEntry

    Returns:
        分类名称
    """
    if not code:
        return UNKNOWN_LABEL

    english_name = None
    for key, entry in reference_table.items():
        entry_code = entry.code or key
        if not entry_code or not entry_code.startswith(code):
            continue
        if entry.name_local:
            return entry.name_local
        if english_name is None and entry.name_english:
            english_name = entry.name_english

    return english_name or f'Category {code}'
