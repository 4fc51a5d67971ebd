"""
配置加载器 - 加载和验证表头关键字映射（YAML）
"""
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional


REQUIRED_SECTIONS = ('records', 'tax', 'categories')
REQUIRED_RECORD_FIELDS = ('object_name', 'value')
REQUIRED_CATEGORY_FIELDS = ('code',)


class ConfigLoader:
    """表头映射配置加载和验证器"""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        初始化配置加载器

        Args:
            config_dir: 配置文件目录，默认为 procurement_analysis/config/
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / 'config'

        self.config_dir = Path(config_dir)
        self._column_mapping = None

    def load_column_mapping(self) -> Dict[str, Any]:
        """
        加载表头关键字映射配置

        Returns:
            映射配置字典
        """
        if self._column_mapping is not None:
            return self._column_mapping

        config_path = self.config_dir / 'column_mapping.yml'

        if not config_path.exists():
            raise FileNotFoundError(f"配置文件不存在: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            mapping = yaml.safe_load(f)

        self._validate_column_mapping(mapping)
        self._column_mapping = mapping
        return self._column_mapping

    def get_record_fields(self) -> Dict[str, Dict[str, Any]]:
        """采购记录表的字段配置（保持配置文件中的顺序）"""
        return self.load_column_mapping()['records']

    def get_category_fields(self) -> Dict[str, Dict[str, Any]]:
        """CPV参照表的字段配置"""
        return self.load_column_mapping()['categories']

    def get_tax_keywords(self) -> List[str]:
        return list(self.load_column_mapping()['tax'].get('keywords', []))

    def get_tax_exclusion_keywords(self) -> List[str]:
        return list(self.load_column_mapping()['tax'].get('exclusion_keywords', []))

    def _validate_column_mapping(self, config: Dict[str, Any]) -> None:
        """
        验证映射配置的完整性

        Args:
            config: 配置字典

        Raises:
            ValueError: 配置无效时抛出
        """
        if not config:
            raise ValueError("配置文件为空")

        for section in REQUIRED_SECTIONS:
            if section not in config:
                raise ValueError(f"配置缺少 '{section}' 节点")
            if not isinstance(config[section], dict):
                raise ValueError(f"'{section}' 必须是字典类型")

        for section, required_fields in (('records', REQUIRED_RECORD_FIELDS),
                                         ('categories', REQUIRED_CATEGORY_FIELDS)):
            fields = config[section]
            for field_name in required_fields:
                if field_name not in fields:
                    raise ValueError(f"'{section}' 缺少必需字段: {field_name}")

            for field_name, field_config in fields.items():
                if not isinstance(field_config, dict):
                    raise ValueError(f"字段 '{field_name}' 配置必须是字典类型")
                keywords = field_config.get('keywords')
                if not keywords or not isinstance(keywords, list):
                    raise ValueError(f"字段 '{field_name}' 必须配置非空的 keywords 列表")
