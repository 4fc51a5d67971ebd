"""采购记录检索"""
import logging
from typing import List, Mapping, Optional, Sequence

from procurement_analysis.records import CategoryEntry, ProcurementRecord
from procurement_analysis.utils.cpv_parser import CpvParser

logger = logging.getLogger(__name__)


def _matches_category_names(codes: List[str], query: str,
                            category_table: Mapping[str, CategoryEntry]) -> bool:
    for code in codes:
        entry = category_table.get(code)
        if entry is None:
            continue
        names = (entry.name_local or '', entry.name_english or '')
        if any(query in name.lower() for name in names):
            return True
    return False


def search_records(records: Sequence[ProcurementRecord], query: Optional[str],
                   category_table: Optional[Mapping[str, CategoryEntry]] = None) -> List[ProcurementRecord]:
    """
    按关键字检索采购记录（不区分大小写）

    匹配范围：采购对象名称、CPV原文、提取出的CPV编码，
    以及参照表中与这些编码完全一致的条目的罗马尼亚语/英语名称。

    Args:
        records: 采购记录
        query: 关键字，为空时返回全部记录
        category_table: CPV参照表（可选）

    Returns:
        命中的记录列表（保持原顺序）
    """
    if not query or not query.strip():
        logger.info(f"检索关键字为空，返回全部 {len(records)} 条记录")
        return list(records)

    search_query = query.strip().lower()
    category_table = category_table or {}

    results = []
    for record in records:
        codes = CpvParser.extract_codes(record.cpv_field)
        if (
            search_query in (record.object_name or '').lower()
            or search_query in (record.cpv_field or '').lower()
            or any(search_query in code.lower() for code in codes)
            or _matches_category_names(codes, search_query, category_table)
        ):
            results.append(record)

    logger.info(f"检索 '{search_query}': {len(records)} 条记录中命中 {len(results)} 条")
    return results
