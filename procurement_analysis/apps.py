"""
采购分析应用配置
"""
from django.apps import AppConfig


class ProcurementAnalysisConfig(AppConfig):
    """采购数据分析应用配置"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'procurement_analysis'
    verbose_name = '采购数据分析'
