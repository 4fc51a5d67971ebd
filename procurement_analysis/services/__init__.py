"""
采购分析服务模块
"""
from .aggregation import build_aggregate_tables, has_time_data
from .category_names import resolve_name
from .record_search import search_records
from .report_generator import ReportGenerator, generate_report

__all__ = [
    'ReportGenerator',
    'build_aggregate_tables',
    'generate_report',
    'has_time_data',
    'resolve_name',
    'search_records',
]
