"""
采购记录聚合服务

按分类、金额区间、月份、季度、季节、资金来源对记录做分组汇总。
所有函数都是纯函数：只读入参，每次返回新的聚合表，调用之间不共享状态。
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from procurement_analysis.constants import (
    MONTHS, QUARTERS, SEASONS, TIME_DATA_MIN_PERCENT, UNKNOWN_LABEL, VALUE_RANGES,
)
from procurement_analysis.records import Aggregate, ProcurementRecord
from procurement_analysis.utils.date_parser import MonthClassifier
from procurement_analysis.utils.formatting import percent

logger = logging.getLogger(__name__)


# ==================== 基础汇总 ====================

def total_excl_tax(records: Sequence[ProcurementRecord]) -> float:
    """不含税金额合计"""
    return sum(record.value_excl_tax for record in records)


def total_incl_tax(records: Sequence[ProcurementRecord]) -> float:
    """含税金额合计"""
    return sum(record.value_incl_tax for record in records)


def aggregate_by_category(records: Sequence[ProcurementRecord]) -> Aggregate:
    """按分类编码汇总（空编码单独成桶）"""
    result = Aggregate()
    for record in records:
        result.add(record.category_code or '', record.value_excl_tax)
    logger.debug(f"分类汇总完成: {len(result)} 个分类")
    return result


def value_range_label(value: float) -> str:
    """金额所属区间标签，低于 10,000 的一律归入首个区间"""
    for label, _lower, upper in VALUE_RANGES:
        if upper is None or value < upper:
            return label
    return VALUE_RANGES[-1][0]


def aggregate_by_value_range(records: Sequence[ProcurementRecord]) -> Aggregate:
    """按固定金额区间汇总，全部记录参与分桶"""
    result = Aggregate.with_buckets(label for label, _lower, _upper in VALUE_RANGES)
    for record in records:
        result.add(value_range_label(record.value_excl_tax), record.value_excl_tax)
    return result


# ==================== 时间维度 ====================

def has_time_data(records: Sequence[ProcurementRecord]) -> bool:
    """
    时间数据充足性判断

    至少 20% 的记录带有启动或完成日期文本即视为充足。
    只检查文本是否存在，不要求能解析出月份。空记录集视为充足，
    由各段落自行处理无数据的情况。
    """
    dated = sum(1 for record in records if record.resolved_date() is not None)
    return dated * 100 >= len(records) * TIME_DATA_MIN_PERCENT


def aggregate_by_month(records: Sequence[ProcurementRecord]) -> Aggregate:
    """按月份汇总（日历顺序，12个桶全部保留）；无法识别月份的记录不计入"""
    result = Aggregate.with_buckets(MONTHS)
    for record in records:
        month = MonthClassifier.classify_month(record.resolved_date())
        if month is not None:
            result.add(month, record.value_excl_tax)
    return result


def aggregate_by_quarter(records: Sequence[ProcurementRecord]) -> Aggregate:
    """按季度汇总（Q1…Q4）"""
    result = Aggregate.with_buckets(QUARTERS)
    for record in records:
        quarter = MonthClassifier.classify_quarter(record.resolved_date())
        if quarter is not None:
            result.add(quarter, record.value_excl_tax)
    return result


def aggregate_by_season(records: Sequence[ProcurementRecord]) -> Aggregate:
    """按季节汇总（Spring→Winter）"""
    result = Aggregate.with_buckets(SEASONS)
    for record in records:
        season = MonthClassifier.classify_season(record.resolved_date())
        if season is not None:
            result.add(season, record.value_excl_tax)
    return result


# ==================== 资金来源 ====================

def has_source_data(records: Sequence[ProcurementRecord]) -> bool:
    """是否至少有一条记录填写了资金来源"""
    return any(record.financing_source for record in records)


def aggregate_by_source(records: Sequence[ProcurementRecord]) -> Aggregate:
    """按资金来源汇总，缺失来源记为 Unknown"""
    result = Aggregate()
    for record in records:
        result.add(record.financing_source or UNKNOWN_LABEL, record.value_excl_tax)
    return result


# ==================== 明细与补充统计 ====================

def top_items(records: Sequence[ProcurementRecord], limit: int) -> List[ProcurementRecord]:
    """金额最高的N条记录（仅金额>0，降序，金额相同保持原顺序）"""
    valid_items = [record for record in records if record.value_excl_tax > 0]
    valid_items.sort(key=lambda record: -record.value_excl_tax)
    return valid_items[:limit]


def value_summary(records: Sequence[ProcurementRecord]) -> Dict[str, float]:
    """
    金额分布摘要：中位数、最小正值、最大值

    Returns:
        dict: {'median': ..., 'min_positive': ..., 'max': ...}，空记录集全为 0
    """
    values = sorted(record.value_excl_tax for record in records)
    if not values:
        return {'median': 0.0, 'min_positive': 0.0, 'max': 0.0}

    middle = len(values) // 2
    if len(values) % 2 == 0:
        median = (values[middle - 1] + values[middle]) / 2
    else:
        median = values[middle]

    positives = [value for value in values if value > 0]
    return {
        'median': median,
        'min_positive': positives[0] if positives else 0.0,
        'max': values[-1],
    }


def category_concentration(aggregate: Aggregate, total_value: float) -> Dict[str, float]:
    """前3/5/10个分类占组合总额的百分比"""
    ranked = [bucket.total_value for _label, bucket in aggregate.sorted_by_value() if bucket.total_value > 0]
    return {
        'top3': percent(sum(ranked[:3]), total_value),
        'top5': percent(sum(ranked[:5]), total_value),
        'top10': percent(sum(ranked[:10]), total_value),
    }


def build_aggregate_tables(records: Sequence[ProcurementRecord]) -> Dict[str, Any]:
    """
    生成全部辅助聚合表（供API/命令行输出JSON）

    时间维度表只在时间数据充足时给出，资金来源表只在存在来源数据时给出，
    否则对应键为 None。
    """
    by_category = aggregate_by_category(records)
    portfolio_total = total_excl_tax(records)
    time_data = has_time_data(records)

    tables: Dict[str, Optional[Dict[str, Any]]] = {
        'summary': {
            'item_count': len(records),
            'total_excl_tax': round(portfolio_total, 2),
            'total_incl_tax': round(total_incl_tax(records), 2),
            **{key: round(value, 2) for key, value in value_summary(records).items()},
        },
        'by_category': by_category.to_dict(),
        'category_concentration': {
            key: round(value, 2) for key, value in category_concentration(by_category, portfolio_total).items()
        },
        'by_value_range': aggregate_by_value_range(records).to_dict(),
        'by_month': aggregate_by_month(records).to_dict() if time_data else None,
        'by_quarter': aggregate_by_quarter(records).to_dict() if time_data else None,
        'by_season': aggregate_by_season(records).to_dict() if time_data else None,
        'by_source': aggregate_by_source(records).to_dict() if has_source_data(records) else None,
    }
    logger.info(f"辅助聚合表生成完成: {len(records)} 条记录, 时间数据{'充足' if time_data else '不足'}")
    return tables
