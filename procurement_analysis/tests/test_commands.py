"""
generate_analysis_report 命令测试
"""
import json
import tempfile
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase

from procurement_analysis.services import ReportGenerator


RECORDS_CSV = '\n'.join([
    'Nr,Obiect,CPV,Valoare fara TVA,Valoare cu TVA,Sursa,Data initiere',
    '1,Reparatii drum,45233141-9,1000,1190,Buget local,15/03/2023',
    '2,Hartie copiator,30197630-1,200,238,Buget local,15/07/2023',
]) + '\n'

CATEGORIES_CSV = 'Cod CPV,Denumire\n45000000-7,Lucrari de constructii\n'


class GenerateAnalysisReportCommandTest(SimpleTestCase):
    """报表命令测试"""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp_path = Path(self._tmp.name)
        self.records_file = self.tmp_path / 'plan.csv'
        self.records_file.write_text(RECORDS_CSV, encoding='utf-8')
        self.cpv_file = self.tmp_path / 'cpv.csv'
        self.cpv_file.write_text(CATEGORIES_CSV, encoding='utf-8')

    def tearDown(self):
        self._tmp.cleanup()

    def test_report_to_stdout(self):
        out = StringIO()
        call_command('generate_analysis_report', str(self.records_file), '--cpv-file', str(self.cpv_file), stdout=out)

        output = out.getvalue()
        self.assertIn('已读取 2 条采购记录, 1 个CPV编码', output)
        self.assertIn('PROCUREMENT DATA ANALYSIS', output)
        self.assertIn('1. Lucrari de constructii (45): 1,000.00 RON (83.33%)', output)
        self.assertIn('9. STRATEGIC RECOMMENDATIONS', output)

    def test_report_to_file(self):
        report_file = self.tmp_path / 'report.txt'
        call_command('generate_analysis_report', str(self.records_file), '--output', str(report_file), stdout=StringIO())

        report = report_file.read_text(encoding='utf-8')
        self.assertTrue(report.startswith('=' * 50))
        self.assertIn('Total procurement items: 2', report)

    def test_search_and_tables(self):
        out = StringIO()
        call_command('generate_analysis_report', str(self.records_file), '--search', 'hartie', '--tables', stdout=out)

        output = out.getvalue()
        self.assertIn('命中 1 条记录', output)
        self.assertIn('Total procurement items: 1', output)
        tables = json.loads(output[output.index('{\n'):])
        self.assertEqual(tables['summary']['item_count'], 1)
        self.assertEqual(tables['by_month']['Jul']['item_count'], 1)

    def test_tables_do_not_regenerate_report(self):
        """测试 --tables 只生成一次报表文本"""
        out = StringIO()
        with patch.object(ReportGenerator, 'generate_data', side_effect=AssertionError('报表被重复生成')):
            call_command('generate_analysis_report', str(self.records_file), '--tables', stdout=out)

        output = out.getvalue()
        self.assertEqual(output.count('1. GENERAL STATISTICS'), 1)
        tables = json.loads(output[output.index('{\n'):])
        self.assertEqual(tables['summary']['item_count'], 2)

    def test_unwritable_output(self):
        report_file = self.tmp_path / 'missing_dir' / 'report.txt'

        with self.assertRaisesMessage(CommandError, '报表写入失败'):
            call_command('generate_analysis_report', str(self.records_file), '--output', str(report_file),
                         stdout=StringIO())

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('generate_analysis_report', str(self.tmp_path / 'missing.csv'), stdout=StringIO())

    def test_unsupported_extension(self):
        text_file = self.tmp_path / 'plan.txt'
        text_file.write_text(RECORDS_CSV, encoding='utf-8')

        with self.assertRaisesMessage(CommandError, '不支持的文件格式'):
            call_command('generate_analysis_report', str(text_file), stdout=StringIO())
