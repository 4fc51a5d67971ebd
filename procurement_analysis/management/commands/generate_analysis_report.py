"""
采购数据分析报表命令
读取采购计划表（CSV/XLSX），可选CPV参照表，生成九段式分析报表
"""
import json
import logging
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from procurement_analysis.core import ConfigLoader, RecordLoadError, RecordLoader
from procurement_analysis.services import ReportGenerator, build_aggregate_tables, search_records

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = '从CSV/Excel采购计划表生成采购数据分析报表'

    def add_arguments(self, parser):
        parser.add_argument(
            'file_path',
            type=str,
            help='采购计划表文件路径（.csv / .xlsx）'
        )
        parser.add_argument(
            '--cpv-file',
            type=str,
            help='CPV编码参照表文件路径（可选，用于解析分类名称）'
        )
        parser.add_argument(
            '--output',
            type=str,
            help='报表输出文件路径（默认输出到终端）'
        )
        parser.add_argument(
            '--encoding',
            type=str,
            default=None,
            help='CSV文件编码（默认自动检测）'
        )
        parser.add_argument(
            '--search',
            type=str,
            default='',
            help='仅分析匹配关键字的记录（采购对象/CPV编码/分类名称）'
        )
        parser.add_argument(
            '--tables',
            action='store_true',
            help='同时输出辅助聚合表（JSON）'
        )

    def handle(self, *args, **options):
        file_path = options['file_path']
        cpv_file = options.get('cpv_file')
        output = options.get('output')
        encoding = options.get('encoding') or settings.PROCUREMENT_ANALYSIS_CONFIG.get('DEFAULT_ENCODING')

        loader = RecordLoader(ConfigLoader(settings.PROCUREMENT_ANALYSIS_CONFIG['CONFIG_DIR']))

        self._validate_file(file_path)
        if cpv_file:
            self._validate_file(cpv_file)

        try:
            records = loader.load_records(file_path, encoding=encoding)
            category_table = loader.load_category_table(cpv_file, encoding=encoding) if cpv_file else {}
        except RecordLoadError as e:
            logger.error(f'数据加载失败: {e} {e.details}')
            raise CommandError(f'数据加载失败: {e}')

        self.stdout.write(f'已读取 {len(records)} 条采购记录, {len(category_table)} 个CPV编码', self.style.SUCCESS)

        if options['search']:
            records = search_records(records, options['search'], category_table)
            self.stdout.write(f'关键字 "{options["search"]}" 命中 {len(records)} 条记录')

        try:
            generator = ReportGenerator(records, category_table)
            report = generator.generate_report()
            tables = build_aggregate_tables(records) if options['tables'] else None
        except Exception as e:
            logger.exception(f'报表生成过程中发生错误: {str(e)}')
            raise CommandError(f'报表生成失败: {str(e)}')

        if output:
            output_path = Path(output)
            try:
                output_path.write_text(report, encoding='utf-8')
            except OSError as e:
                logger.error(f'报表写入失败: {output_path} {e}')
                raise CommandError(f'报表写入失败: {e}')
            self.stdout.write(f'报表已保存: {output_path}', self.style.SUCCESS)
        else:
            self.stdout.write(report, ending='')

        if tables is not None:
            self.stdout.write(json.dumps(tables, ensure_ascii=False, indent=2))

    def _validate_file(self, file_path):
        """校验文件存在、扩展名与大小限制"""
        config = settings.PROCUREMENT_ANALYSIS_CONFIG
        path = Path(file_path)

        if not path.exists():
            raise CommandError(f'文件不存在: {path}')

        if path.suffix.lower() not in config['ALLOWED_EXTENSIONS']:
            raise CommandError(
                f'不支持的文件格式: {path.suffix}（支持: {", ".join(config["ALLOWED_EXTENSIONS"])}）'
            )

        file_size = path.stat().st_size
        if file_size > config['MAX_FILE_SIZE']:
            raise CommandError(
                f'文件过大: {file_size / 1024 / 1024:.1f}MB（上限 {config["MAX_FILE_SIZE"] / 1024 / 1024:.0f}MB）'
            )
