"""
采购数据加载核心模块
"""
from .config_loader import ConfigLoader
from .record_loader import RecordLoadError, RecordLoader

__all__ = ['ConfigLoader', 'RecordLoadError', 'RecordLoader']
