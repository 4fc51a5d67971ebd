"""
报表段落生成器

九个相互独立的段落，每段是 ReportContext 的纯函数，返回以且仅以一个空行结尾的纯文本。
前置数据缺失时输出说明语句并正常返回，从不向调用方抛出异常。
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Mapping, Sequence

from procurement_analysis.constants import (
    CURRENCY, GENERAL_RECOMMENDATIONS, MONTHS, PEAK_MONTH_WARNING_SHARE, SECTION_RULE,
    TOP_CATEGORIES_LIMIT, TOP_ITEMS_LIMIT,
)
from procurement_analysis.records import CategoryEntry, ProcurementRecord
from procurement_analysis.services import aggregation, dispersion
from procurement_analysis.services.category_names import resolve_name
from procurement_analysis.utils.formatting import format_money, percent

logger = logging.getLogger(__name__)


MONTHLY_VARIABILITY_TEXT = {
    'HIGH': '  HIGH variability - procurement spending is uneven across months',
    'MODERATE': '  MODERATE variability - some seasonal fluctuation in spending',
    'LOW': '  LOW variability - relatively consistent monthly spending',
}

SEASONAL_BALANCE_TEXT = {
    'EXCELLENT': '  EXCELLENT seasonal balance - procurement is well distributed across seasons',
    'GOOD': '  GOOD seasonal balance - minor seasonal variations',
    'MODERATE': '  MODERATE seasonal imbalance - some seasons significantly busier',
    'HIGH': '  HIGH seasonal imbalance - consider redistributing procurement timing',
}


@dataclass
class ReportContext:
    """
    一次报表生成的共享输入

    时间数据充足性只在构造时判断一次，所有时间维度段落共用同一结论。
    """
    records: Sequence[ProcurementRecord]
    category_table: Mapping[str, CategoryEntry]
    time_data_available: bool = field(init=False)
    portfolio_total: float = field(init=False)

    def __post_init__(self):
        self.time_data_available = aggregation.has_time_data(self.records)
        self.portfolio_total = aggregation.total_excl_tax(self.records)


def _render(number: int, title: str, body: List[str]) -> str:
    """段落 = 标题 + 分隔线 + 正文 + 一个空行"""
    while body and body[-1] == '':
        body = body[:-1]
    return '\n'.join([f'{number}. {title}', SECTION_RULE, *body]) + '\n\n'


# ==================== 1. 基本统计 ====================

def general_statistics(context: ReportContext) -> str:
    records = context.records
    if not records:
        return _render(1, 'GENERAL STATISTICS', ['No procurement items available for analysis.'])

    total_without_tva = context.portfolio_total
    total_with_tva = aggregation.total_incl_tax(records)
    total_tva = total_with_tva - total_without_tva

    lines = [
        f'Total procurement items: {len(records)}',
        f'Total value (without TVA): {format_money(total_without_tva)} {CURRENCY}',
        f'Total value (with TVA): {format_money(total_with_tva)} {CURRENCY}',
        f'Total TVA amount: {format_money(total_tva)} {CURRENCY}',
    ]
    if total_without_tva > 0 and total_with_tva > 0:
        lines.append(f'Effective TVA rate: {percent(total_tva, total_without_tva):.2f}%')

    lines.append(f'Number of CPV categories: {len(aggregation.aggregate_by_category(records))}')
    lines.append(f'Average value per item: {format_money(total_without_tva / len(records))} {CURRENCY}')
    return _render(1, 'GENERAL STATISTICS', lines)


# ==================== 2. 分类分析 ====================

def category_analysis(context: ReportContext) -> str:
    by_category = aggregation.aggregate_by_category(context.records)
    ranked = [
        (code, bucket) for code, bucket in by_category.sorted_by_value()
        if bucket.total_value > 0
    ][:TOP_CATEGORIES_LIMIT]

    if not ranked:
        return _render(2, 'CATEGORY ANALYSIS', ['No category data available.'])

    lines = ['Top CPV Categories by Value:', '']
    for rank, (code, bucket) in enumerate(ranked, start=1):
        name = resolve_name(code, context.category_table)
        share = percent(bucket.total_value, context.portfolio_total)
        lines.append(f'{rank}. {name} ({code}): {format_money(bucket.total_value)} {CURRENCY} ({share:.2f}%)')
    return _render(2, 'CATEGORY ANALYSIS', lines)


# ==================== 3. 金额区间分布 ====================

def value_distribution(context: ReportContext) -> str:
    if not context.records:
        return _render(3, 'VALUE DISTRIBUTION ANALYSIS', ['No value distribution data available.'])

    by_range = aggregation.aggregate_by_value_range(context.records)
    total_value = by_range.total_value
    total_count = by_range.total_count

    lines = [
        f"{'Value Range':<15} {'Count':<10} {'% of Items':<15} {'Total Value':<15} {'% of Value':<15}",
        '-' * 66,
    ]
    for label, bucket in by_range.items():
        amount = f'{format_money(bucket.total_value)} {CURRENCY}'
        lines.append(
            f'{label:<15} {bucket.item_count:<10d} {percent(bucket.item_count, total_count):<15.2f} '
            f'{amount:<15} {percent(bucket.total_value, total_value):<15.2f}'
        )
    return _render(3, 'VALUE DISTRIBUTION ANALYSIS', lines)


# ==================== 4. 月度分布 ====================

def monthly_distribution(context: ReportContext) -> str:
    title = 'MONTHLY DISTRIBUTION ANALYSIS'
    if not context.time_data_available:
        return _render(4, title, [
            'Insufficient time data available for monthly analysis.',
            'Consider adding initiation or completion dates to enable detailed time-based analysis.',
        ])

    by_month = aggregation.aggregate_by_month(context.records)
    total_value = by_month.total_value
    total_count = by_month.total_count
    if total_value == 0 or total_count == 0:
        return _render(4, title, ['Insufficient monthly time data available for analysis.'])

    lines = [
        f"{'Month':<8} {'Count':<8} {'% of Items':<12} {'Total Value':<15} {'% of Value':<12}",
        '-' * 69,
    ]
    for month, bucket in by_month.items():
        lines.append(
            f'{month:<8} {bucket.item_count:<8d} {percent(bucket.item_count, total_count):<12.1f} '
            f'{format_money(bucket.total_value):<15} {percent(bucket.total_value, total_value):<12.1f}'
        )

    values = by_month.values_by_label()
    peak_month = max(MONTHS, key=lambda month: values[month])
    low_month = min((month for month in MONTHS if values[month] > 0), key=lambda month: values[month])

    lines += [
        '',
        'Monthly Distribution Insights:',
        f'- Peak spending month: {peak_month} ({percent(values[peak_month], total_value):.1f}% of annual spending)',
        f'- Lowest spending month: {low_month} ({percent(values[low_month], total_value):.1f}% of annual spending)',
    ]

    spread = dispersion.analyze(list(values.values()), len(MONTHS))
    if spread is not None:
        cv = spread.coefficient_of_variation
        lines.append(f'- Monthly spending variability: {cv:.1f}% coefficient of variation')
        lines.append(MONTHLY_VARIABILITY_TEXT[dispersion.classify_monthly_variability(cv)])

    averages = {month: bucket.average_value for month, bucket in by_month.items() if bucket.item_count > 0}
    highest = max(averages, key=lambda month: averages[month])
    lowest = min(averages, key=lambda month: averages[month])
    lines += [
        '',
        'Monthly Efficiency Analysis:',
        f'- Highest average value per item: {highest} ({format_money(averages[highest])} {CURRENCY}/item)',
        f'- Lowest average value per item: {lowest} ({format_money(averages[lowest])} {CURRENCY}/item)',
    ]
    return _render(4, title, lines)


# ==================== 5. 季度分布 ====================

def quarterly_distribution(context: ReportContext) -> str:
    title = 'QUARTERLY DISTRIBUTION ANALYSIS'
    if not context.time_data_available:
        return _render(5, title, ['No time distribution data available.'])

    by_quarter = aggregation.aggregate_by_quarter(context.records)
    total_value = by_quarter.total_value
    if total_value <= 0:
        return _render(5, title, ['No quarterly time data available for analysis.'])

    lines = ['Procurement Value by Quarter:', '']
    for quarter, bucket in by_quarter.items():
        if bucket.total_value > 0:
            lines.append(
                f'{quarter:<3}: {format_money(bucket.total_value)} {CURRENCY} '
                f'({percent(bucket.total_value, total_value):.2f}%)'
            )
    return _render(5, title, lines)


# ==================== 6. 重点采购项 ====================

def notable_items(context: ReportContext) -> str:
    title = 'NOTABLE PROCUREMENT ITEMS'
    if not context.records:
        return _render(6, title, ['No procurement items available for analysis.'])

    items = aggregation.top_items(context.records, TOP_ITEMS_LIMIT)
    if not items:
        return _render(6, title, ['No items with positive values found.'])

    lines = [f'Top {TOP_ITEMS_LIMIT} Highest Value Items:', '']
    for rank, item in enumerate(items, start=1):
        lines.append(f'{rank}. {item.object_name}')
        lines.append(f'   Value: {format_money(item.value_excl_tax)} {CURRENCY}')
        if item.category_code:
            lines.append(f'   CPV: {item.category_code}')
        lines.append('')
    return _render(6, title, lines)


# ==================== 7. 资金来源 ====================

def financing_sources(context: ReportContext) -> str:
    title = 'FINANCING SOURCE ANALYSIS'
    if not aggregation.has_source_data(context.records):
        return _render(7, title, ['No financing source data available.'])

    by_source = aggregation.aggregate_by_source(context.records)
    lines = []
    for source, bucket in by_source.sorted_by_value():
        share = percent(bucket.total_value, context.portfolio_total)
        lines.append(
            f'{source}: {format_money(bucket.total_value)} {CURRENCY} ({share:.1f}%, {bucket.item_count} items)'
        )
    return _render(7, title, lines)


# ==================== 8. 季节分析 ====================

def seasonal_analysis(context: ReportContext) -> str:
    title = 'SEASONAL ANALYSIS'
    if not context.time_data_available:
        return _render(8, title, ['Insufficient time data available for seasonal analysis.'])

    by_season = aggregation.aggregate_by_season(context.records)
    total_value = by_season.total_value
    total_count = by_season.total_count
    if total_value == 0:
        return _render(8, title, ['No seasonal data available for analysis.'])

    lines = [
        f"{'Season':<10} {'Count':<8} {'% of Items':<12} {'Total Value':<15} {'% of Value':<12} {'Avg/Month':<15}",
        '-' * 81,
    ]
    for season, bucket in by_season.items():
        lines.append(
            f'{season:<10} {bucket.item_count:<8d} {percent(bucket.item_count, total_count):<12.1f} '
            f'{format_money(bucket.total_value):<15} {percent(bucket.total_value, total_value):<12.1f} '
            f'{format_money(bucket.total_value / 3.0):<15}'
        )

    values = by_season.values_by_label()
    seasons = list(values)
    peak_season = max(seasons, key=lambda season: values[season])
    lines += [
        '',
        'Seasonal Insights:',
        f'- Peak procurement season: {peak_season} ({percent(values[peak_season], total_value):.1f}% of annual value)',
    ]

    active_seasons = [season for season in seasons if values[season] > 0]
    if active_seasons:
        low_season = min(active_seasons, key=lambda season: values[season])
        lines.append(
            f'- Lowest procurement season: {low_season} '
            f'({percent(values[low_season], total_value):.1f}% of annual value)'
        )

    spread = dispersion.analyze(list(values.values()), len(seasons))
    if spread is not None:
        cv = spread.coefficient_of_variation
        lines.append(f'- Seasonal variability: {cv:.1f}% coefficient of variation')
        lines.append(SEASONAL_BALANCE_TEXT[dispersion.classify_seasonal_balance(cv)])

    lines += ['', 'Seasonal Efficiency Analysis:']
    for season, bucket in by_season.items():
        if bucket.item_count > 0:
            lines.append(f'- {season}: {format_money(bucket.average_value)} {CURRENCY} average per item')
    return _render(8, title, lines)


# ==================== 9. 策略建议 ====================

def recommendations(context: ReportContext) -> str:
    title = 'STRATEGIC RECOMMENDATIONS'
    if not context.records:
        return _render(9, title, ['No procurement items available for generating recommendations.'])

    lines = []
    if context.time_data_available:
        values = aggregation.aggregate_by_month(context.records).values_by_label()
        total_value = sum(values.values())
        peak_month = max(MONTHS, key=lambda month: values[month])
        peak_share = percent(values[peak_month], total_value)
        if peak_share > PEAK_MONTH_WARNING_SHARE:
            lines += [
                'Monthly Distribution Recommendations:',
                f'- Peak spending in {peak_month} ({peak_share:.1f}% of annual procurement)',
                '  Consider distributing procurement more evenly across months',
                '  to reduce seasonal budget pressure and improve supplier capacity planning.',
                '',
            ]
            logger.debug(f"峰值月份集中度预警: {peak_month} 占比 {peak_share:.1f}%")

    lines.append('General Procurement Excellence:')
    lines += [f'- {text}' for text in GENERAL_RECOMMENDATIONS]
    return _render(9, title, lines)


# 固定输出顺序
SECTION_BUILDERS: List[Callable[[ReportContext], str]] = [
    general_statistics,
    category_analysis,
    value_distribution,
    monthly_distribution,
    quarterly_distribution,
    notable_items,
    financing_sources,
    seasonal_analysis,
    recommendations,
]
