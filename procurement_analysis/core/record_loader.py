"""
采购记录加载器
从CSV/Excel读取采购计划表与CPV参照表，按表头关键字识别列，
转换为分析引擎使用的只读记录。分析引擎本身不依赖本模块。
"""
import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import chardet
import pandas as pd

from procurement_analysis.core.config_loader import ConfigLoader
from procurement_analysis.records import CategoryEntry, ProcurementRecord
from procurement_analysis.utils.amount_parser import AmountParser
from procurement_analysis.utils.cpv_parser import CpvParser

logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = ('.csv', '.xlsx')
HEADER_SCAN_ROWS = 20


class RecordLoadError(Exception):
    """文件读取或表头识别失败时抛出，附带上下文信息便于提示。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


def detect_encoding(file_path: Path) -> str:
    """自动检测CSV文件编码，置信度不足时回退 utf-8-sig"""
    with open(file_path, 'rb') as f:
        raw_data = f.read(10000)

    result = chardet.detect(raw_data)
    detected_encoding = result['encoding']
    confidence = result['confidence']

    if confidence > 0.7 and detected_encoding:
        encoding_map = {
            'ISO-8859-1': 'latin1',
            'ascii': 'utf-8',
        }
        detected_encoding = encoding_map.get(detected_encoding, detected_encoding)
        logger.info(f"检测到文件编码: {detected_encoding} (置信度: {confidence:.2%})")
        return detected_encoding

    logger.warning(f"编码检测置信度过低 ({confidence:.2%})，使用 utf-8-sig")
    return 'utf-8-sig'


class RecordLoader:
    """采购计划表 / CPV参照表加载器"""

    def __init__(self, config_loader: Optional[ConfigLoader] = None):
        self.config_loader = config_loader or ConfigLoader()

    # ==================== 对外接口 ====================

    def load_records(self, file_path, encoding: Optional[str] = None) -> List[ProcurementRecord]:
        """
        读取采购计划表

        Args:
            file_path: CSV/XLSX 文件路径
            encoding: CSV编码，None时自动检测

        Returns:
            ProcurementRecord 列表（保持文件行顺序）

        Raises:
            RecordLoadError: 文件不存在、格式不支持或找不到表头
        """
        frame = self._read_frame(file_path, encoding)
        header_row, columns = self._detect_header(
            frame, self._match_record_columns, required=('object_name',), any_of=('value_excl_tax', 'value_incl_tax')
        )
        if header_row is None:
            raise RecordLoadError(
                f"未识别到采购表头（需包含采购对象和金额列）: {file_path}",
                {'path': str(file_path), 'scanned_rows': min(HEADER_SCAN_ROWS, len(frame))},
            )

        logger.info(f"表头位于第 {header_row + 1} 行, 列映射: {columns}")
        if 'value_incl_tax' not in columns:
            logger.warning("未找到含税金额列，含税金额按 0 处理")

        records = []
        skipped = 0
        for index in range(header_row + 1, len(frame)):
            row = frame.iloc[index]
            name = self._cell(row, columns.get('object_name'))
            value_text = self._cell(row, columns.get('value_excl_tax'))
            if not name and not value_text:
                skipped += 1
                continue

            cpv_text = self._cell(row, columns.get('cpv_field'))
            records.append(ProcurementRecord(
                object_name=name,
                category_code=CpvParser.category_code(cpv_text),
                value_excl_tax=AmountParser.parse_amount(value_text),
                value_incl_tax=AmountParser.parse_amount(self._cell(row, columns.get('value_incl_tax'))),
                initiation_date=self._cell(row, columns.get('initiation_date')) or None,
                completion_date=self._cell(row, columns.get('completion_date')) or None,
                financing_source=self._cell(row, columns.get('financing_source')) or None,
                cpv_field=cpv_text or None,
                row_number=self._row_number(self._cell(row, columns.get('row_number')), index),
            ))

        if skipped:
            logger.warning(f"跳过 {skipped} 个空行（无采购对象且无金额）")
        logger.info(f"从 {file_path} 读取 {len(records)} 条采购记录")
        return records

    def load_category_table(self, file_path, encoding: Optional[str] = None) -> Dict[str, CategoryEntry]:
        """
        读取CPV参照表

        Returns:
            dict: CPV编码 -> CategoryEntry（保持文件行顺序）
        """
        frame = self._read_frame(file_path, encoding)
        header_row, columns = self._detect_header(frame, self._match_category_columns, required=('code',))
        if header_row is None:
            raise RecordLoadError(
                f"未识别到CPV参照表表头（需包含编码列）: {file_path}",
                {'path': str(file_path)},
            )

        table = {}
        for index in range(header_row + 1, len(frame)):
            row = frame.iloc[index]
            code = self._cell(row, columns.get('code'))
            if not code:
                continue
            table[code] = CategoryEntry(
                code=code,
                name_local=self._cell(row, columns.get('name_local')) or None,
                name_english=self._cell(row, columns.get('name_english')) or None,
            )

        logger.info(f"从 {file_path} 读取 {len(table)} 个CPV编码")
        return table

    # ==================== 文件读取 ====================

    def _read_frame(self, file_path, encoding: Optional[str]) -> pd.DataFrame:
        path = Path(file_path)
        if not path.exists():
            raise RecordLoadError(f"文件不存在: {path}", {'path': str(path)})

        suffix = path.suffix.lower()
        if suffix not in SUPPORTED_EXTENSIONS:
            raise RecordLoadError(
                f"不支持的文件格式: {suffix}",
                {'path': str(path), 'supported': list(SUPPORTED_EXTENSIONS)},
            )

        try:
            if suffix == '.csv':
                frame = pd.read_csv(
                    path, header=None, dtype=str, keep_default_na=False,
                    encoding=encoding or detect_encoding(path),
                    sep=None, engine='python',
                )
            else:
                frame = pd.read_excel(path, header=None, dtype=str, sheet_name=0)
        except (ValueError, OSError, csv.Error) as e:
            raise RecordLoadError(f"文件读取失败: {e}", {'path': str(path)}) from e

        return frame.fillna('')

    # ==================== 表头识别 ====================

    def _detect_header(self, frame: pd.DataFrame, matcher, required: Tuple[str, ...],
                       any_of: Tuple[str, ...] = ()) -> Tuple[Optional[int], Dict[str, int]]:
        """在前 HEADER_SCAN_ROWS 行中寻找满足必需列的表头行"""
        for index in range(min(HEADER_SCAN_ROWS, len(frame))):
            headers = [str(value).strip().lower() for value in frame.iloc[index].tolist()]
            columns = matcher(headers)
            if all(key in columns for key in required) and (not any_of or any(key in columns for key in any_of)):
                return index, columns
        return None, {}

    @staticmethod
    def _keyword_hit(header: str, field_config: Dict[str, Any]) -> bool:
        keywords = field_config.get('keywords', [])
        if field_config.get('exact_match'):
            return header in keywords
        return any(keyword in header for keyword in keywords)

    def _match_record_columns(self, headers: List[str]) -> Dict[str, int]:
        fields = self.config_loader.get_record_fields()
        tax_keywords = self.config_loader.get_tax_keywords()
        exclusion_keywords = self.config_loader.get_tax_exclusion_keywords()

        columns: Dict[str, int] = {}
        for position, header in enumerate(headers):
            if not header:
                continue
            for field_name, field_config in fields.items():
                if not self._keyword_hit(header, field_config):
                    continue
                if field_name == 'value':
                    # 提到税且未声明"不含"的金额列视为含税
                    mentions_tax = any(keyword in header for keyword in tax_keywords)
                    excludes_tax = any(keyword in header for keyword in exclusion_keywords)
                    field_name = 'value_incl_tax' if mentions_tax and not excludes_tax else 'value_excl_tax'
                columns.setdefault(field_name, position)
                break
        return columns

    def _match_category_columns(self, headers: List[str]) -> Dict[str, int]:
        fields = self.config_loader.get_category_fields()
        columns: Dict[str, int] = {}
        for position, header in enumerate(headers):
            if not header:
                continue
            for field_name, field_config in fields.items():
                if self._keyword_hit(header, field_config):
                    columns.setdefault(field_name, position)
                    break
        return columns

    # ==================== 单元格 ====================

    @staticmethod
    def _cell(row: pd.Series, position: Optional[int]) -> str:
        if position is None:
            return ''
        return str(row.iloc[position]).strip()

    @staticmethod
    def _row_number(text: str, index: int) -> int:
        """序号列可解析时使用序号，否则使用文件行号（从1开始）"""
        try:
            return int(float(text))
        except (ValueError, OverflowError):
            return index + 1
