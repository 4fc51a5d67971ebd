"""
采购分析报表生成器

统一入口：generate_report(records, category_table)
负责参数校验、构造共享上下文，并按固定顺序拼接九个段落。
"""
import logging
from typing import Any, Dict, Mapping, Optional, Sequence

from procurement_analysis.constants import BANNER_RULE, REPORT_TITLE
from procurement_analysis.records import CategoryEntry, ProcurementRecord
from procurement_analysis.services.aggregation import build_aggregate_tables
from procurement_analysis.services.report_sections import SECTION_BUILDERS, ReportContext

logger = logging.getLogger(__name__)


REPORT_BANNER = f"{BANNER_RULE}\n{' ' * 12}{REPORT_TITLE}{' ' * 14}\n{BANNER_RULE}\n\n"


class ReportGenerator:
    """
    采购分析报表生成器
    - 只负责协调聚合服务与段落生成器
    - 无状态：同一输入重复生成结果逐字节一致
    """

    def __init__(self, records: Sequence[ProcurementRecord],
                 category_table: Optional[Mapping[str, CategoryEntry]]):
        """
        初始化报表生成器

        Args:
            records: 采购记录序列（调用方保证生成期间不被修改）
            category_table: CPV编码 -> CategoryEntry

        Raises:
            ValueError: records 或 category_table 为 None
        """
        if records is None:
            raise ValueError("采购记录集合不能为None")
        if category_table is None:
            raise ValueError("CPV分类参照表不能为None")

        self.records = list(records)
        self.category_table = category_table

    def generate_sections(self) -> Dict[str, str]:
        """
        按固定顺序生成全部段落

        Returns:
            dict: 段落函数名 -> 段落文本（保持输出顺序）
        """
        context = ReportContext(self.records, self.category_table)
        logger.info(
            f"开始生成分析报表: {len(self.records)} 条记录, {len(self.category_table)} 个CPV编码, "
            f"时间数据{'充足' if context.time_data_available else '不足'}"
        )
        return {builder.__name__: builder(context) for builder in SECTION_BUILDERS}

    def generate_report(self) -> str:
        """生成完整报表文本：标题横幅 + 九个段落"""
        return REPORT_BANNER + ''.join(self.generate_sections().values())

    def generate_data(self) -> Dict[str, Any]:
        """
        报表文本 + 辅助聚合表，用于API接口或JSON导出

        Returns:
            dict: {'report': str, 'tables': dict}
        """
        return {
            'report': self.generate_report(),
            'tables': build_aggregate_tables(self.records),
        }


def generate_report(records: Sequence[ProcurementRecord],
                    category_table: Mapping[str, CategoryEntry]) -> str:
    """生成采购分析报表（入口函数）"""
    return ReportGenerator(records, category_table).generate_report()
