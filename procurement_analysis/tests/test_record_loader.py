"""
采购记录加载器单元测试
"""
import pytest
import yaml
from openpyxl import Workbook

from procurement_analysis.core import ConfigLoader, RecordLoadError, RecordLoader


RECORDS_CSV = '\n'.join([
    'Programul anual al achizițiilor publice 2023,,,,,,,',
    'Nr. crt.,Obiectul achiziției,Cod CPV,Valoare estimată fără TVA,Valoare cu TVA,'
    'Sursa de finanțare,Data inițiere,Data finalizare',
    '1,Reparații drum,45233141-9 Lucrări,"120.000,00","142.800,00",Buget local,15 martie 2023,',
    '2,Hârtie copiator,30197630-1,8000,9520,Fonduri UE,,iulie 2023',
    ',,,,,,,',
    '3,Consultanță,,abc,,,,',
]) + '\n'

CATEGORIES_CSV = '\n'.join([
    'Cod CPV,Denumire,English name',
    '45000000-7,Lucrări de construcții,Construction work',
    '30197630-1,,Printing paper',
    ',ignored,ignored',
]) + '\n'


@pytest.fixture
def loader():
    return RecordLoader()


class TestLoadRecords:
    """采购计划表读取测试类"""

    def test_csv_with_preamble_and_blank_rows(self, loader, tmp_path):
        path = tmp_path / 'plan.csv'
        path.write_text(RECORDS_CSV, encoding='utf-8')

        records = loader.load_records(path, encoding='utf-8')

        assert [record.object_name for record in records] == ['Reparații drum', 'Hârtie copiator', 'Consultanță']
        first, second, third = records
        assert first.row_number == 1
        assert first.category_code == '45'
        assert first.cpv_field == '45233141-9 Lucrări'
        assert first.value_excl_tax == pytest.approx(120000.0)
        assert first.value_incl_tax == pytest.approx(142800.0)
        assert first.financing_source == 'Buget local'
        assert first.resolved_date() == '15 martie 2023'
        assert first.completion_date is None

        assert second.resolved_date() == 'iulie 2023'
        assert second.value_excl_tax == pytest.approx(8000.0)

        assert third.value_excl_tax == 0.0
        assert third.category_code == ''
        assert third.financing_source is None

    def test_xlsx(self, loader, tmp_path):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(['Description', 'CPV', 'Value without VAT', 'Funding source', 'Start date'])
        sheet.append(['Laptops', '30213100-6', 15000, 'EU funds', 'May 2023'])
        sheet.append(['Desks', '39121100-7', 4200.5, None, None])
        path = tmp_path / 'plan.xlsx'
        workbook.save(path)

        records = loader.load_records(path)

        assert [record.object_name for record in records] == ['Laptops', 'Desks']
        assert records[0].value_excl_tax == pytest.approx(15000.0)
        assert records[0].value_incl_tax == 0.0
        assert records[0].initiation_date == 'May 2023'
        assert records[1].value_excl_tax == pytest.approx(4200.5)
        assert records[1].financing_source is None
        assert records[1].row_number == 3

    def test_missing_header(self, loader, tmp_path):
        path = tmp_path / 'plan.csv'
        path.write_text('a,b\n1,2\n', encoding='utf-8')

        with pytest.raises(RecordLoadError) as exc_info:
            loader.load_records(path, encoding='utf-8')
        assert exc_info.value.details['path'] == str(path)

    def test_missing_file(self, loader, tmp_path):
        with pytest.raises(RecordLoadError):
            loader.load_records(tmp_path / 'missing.csv')

    def test_unsupported_extension(self, loader, tmp_path):
        path = tmp_path / 'plan.txt'
        path.write_text('x', encoding='utf-8')

        with pytest.raises(RecordLoadError) as exc_info:
            loader.load_records(path)
        assert exc_info.value.details['supported'] == ['.csv', '.xlsx']

    def test_encoding_detection(self, loader, tmp_path):
        path = tmp_path / 'plan.csv'
        path.write_text('Obiect,Valoare\nBirou,100\n', encoding='utf-8')

        records = loader.load_records(path)
        assert records[0].object_name == 'Birou'
        assert records[0].value_excl_tax == pytest.approx(100.0)


class TestLoadCategoryTable:
    """CPV参照表读取测试类"""

    def test_csv(self, loader, tmp_path):
        path = tmp_path / 'cpv.csv'
        path.write_text(CATEGORIES_CSV, encoding='utf-8')

        table = loader.load_category_table(path, encoding='utf-8')

        assert list(table) == ['45000000-7', '30197630-1']
        assert table['45000000-7'].name_local == 'Lucrări de construcții'
        assert table['45000000-7'].name_english == 'Construction work'
        assert table['30197630-1'].name_local is None
        assert table['30197630-1'].division == '30'


class TestConfigLoader:
    """表头映射配置测试类"""

    def test_default_mapping(self):
        config_loader = ConfigLoader()
        assert 'object_name' in config_loader.get_record_fields()
        assert 'tva' in config_loader.get_tax_keywords()
        assert config_loader.load_column_mapping() is config_loader.load_column_mapping()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader(tmp_path).load_column_mapping()

    @pytest.mark.parametrize('mapping', [
        {},
        {'records': {}, 'tax': {}},
        {'records': {'object_name': {'keywords': ['obiect']}}, 'tax': {}, 'categories': {'code': {'keywords': ['cod']}}},
        {'records': {'object_name': {'keywords': []}, 'value': {'keywords': ['valoare']}},
         'tax': {}, 'categories': {'code': {'keywords': ['cod']}}},
    ])
    def test_invalid_mapping(self, tmp_path, mapping):
        (tmp_path / 'column_mapping.yml').write_text(yaml.safe_dump(mapping), encoding='utf-8')

        with pytest.raises(ValueError):
            ConfigLoader(tmp_path).load_column_mapping()
