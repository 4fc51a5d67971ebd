"""
采购分析报表生成器单元测试
"""
import re

import pytest

from procurement_analysis.records import CategoryEntry, ProcurementRecord
from procurement_analysis.services import ReportGenerator, generate_report
from procurement_analysis.services.report_generator import REPORT_BANNER
from procurement_analysis.services.report_sections import SECTION_BUILDERS, ReportContext


CATEGORY_TABLE = {
    '45210000-2': CategoryEntry('45210000-2', 'Construcții', 'Construction'),
    '30192000-1': CategoryEntry('30192000-1', 'Articole de birou', 'Office supplies'),
}

SECTION_TITLES = [
    '1. GENERAL STATISTICS',
    '2. CATEGORY ANALYSIS',
    '3. VALUE DISTRIBUTION ANALYSIS',
    '4. MONTHLY DISTRIBUTION ANALYSIS',
    '5. QUARTERLY DISTRIBUTION ANALYSIS',
    '6. NOTABLE PROCUREMENT ITEMS',
    '7. FINANCING SOURCE ANALYSIS',
    '8. SEASONAL ANALYSIS',
    '9. STRATEGIC RECOMMENDATIONS',
]


def make_record(name, value, code='45', date=None, source=None, incl=None):
    return ProcurementRecord(
        object_name=name,
        category_code=code,
        value_excl_tax=value,
        value_incl_tax=value * 1.19 if incl is None else incl,
        initiation_date=date,
        financing_source=source,
    )


@pytest.fixture
def dated_records():
    return [
        make_record('Reparații drum', 120000.0, '45', '15 martie 2023', 'Buget local'),
        make_record('Hârtie copiator', 8000.0, '30', 'March 2023', 'Buget local'),
        make_record('Consultanță', 30000.0, '79', '15/07/2023', 'Fonduri UE'),
        make_record('Iluminat public', 60000.0, '45', '03/15/2023'),
        make_record('Mobilier', 20000.0, '39', 'noiembrie 2023', 'Fonduri UE'),
    ]


def sections_of(report):
    """按段落标题切分报表"""
    body = report[len(REPORT_BANNER):]
    return re.split(r'(?m)^(?=\d\. [A-Z ]+\n-{50}\n)', body)[1:]


class TestReportStructure:
    """报表结构测试类"""

    def test_banner_and_section_order(self, dated_records):
        report = generate_report(dated_records, CATEGORY_TABLE)

        assert report.startswith('=' * 50 + '\n' + ' ' * 12 + 'PROCUREMENT DATA ANALYSIS')
        sections = sections_of(report)
        assert [section.splitlines()[0] for section in sections] == SECTION_TITLES
        for section in sections:
            assert section.splitlines()[1] == '-' * 50
            assert section.endswith('\n\n')
            assert not section.endswith('\n\n\n')

    def test_idempotent(self, dated_records):
        generator = ReportGenerator(dated_records, CATEGORY_TABLE)
        assert generator.generate_report() == generator.generate_report()
        assert generate_report(dated_records, CATEGORY_TABLE) == generator.generate_report()

    def test_none_inputs_rejected(self, dated_records):
        with pytest.raises(ValueError):
            ReportGenerator(None, CATEGORY_TABLE)
        with pytest.raises(ValueError):
            ReportGenerator(dated_records, None)

    def test_empty_records_still_render_every_section(self):
        report = generate_report([], {})
        assert [section.splitlines()[0] for section in sections_of(report)] == SECTION_TITLES
        assert 'No procurement items available for analysis.' in report
        assert 'No category data available.' in report
        assert 'No financing source data available.' in report

    def test_sections_are_independent(self, dated_records):
        context = ReportContext(dated_records, CATEGORY_TABLE)
        sections = ReportGenerator(dated_records, CATEGORY_TABLE).generate_sections()
        assert list(sections) == [builder.__name__ for builder in SECTION_BUILDERS]
        for builder in SECTION_BUILDERS:
            assert builder(context) == sections[builder.__name__]


class TestGeneralStatistics:
    """基本统计段落测试类"""

    def test_tva_identity(self):
        records = [
            make_record('A', 1000.0, incl=1190.0),
            make_record('B', 500.0, incl=595.0),
        ]
        report = generate_report(records, {})

        assert 'Total procurement items: 2' in report
        assert 'Total value (without TVA): 1,500.00 RON' in report
        assert 'Total value (with TVA): 1,785.00 RON' in report
        assert 'Total TVA amount: 285.00 RON' in report
        assert 'Effective TVA rate: 19.00%' in report
        assert 'Average value per item: 750.00 RON' in report

    def test_no_tva_rate_without_incl_values(self):
        report = generate_report([make_record('A', 1000.0, incl=0.0)], {})
        assert 'Effective TVA rate' not in report


class TestCategoryAndItems:
    """分类与重点采购项测试类"""

    def test_category_names_and_shares(self, dated_records):
        report = generate_report(dated_records, CATEGORY_TABLE)
        assert '1. Construcții (45): 180,000.00 RON (75.63%)' in report
        assert '2. Consultanță' not in report
        assert '2. Category 79 (79): 30,000.00 RON (12.61%)' in report
        assert '4. Articole de birou (30): 8,000.00 RON (3.36%)' in report

    def test_top_items_skip_zero_values(self):
        records = [make_record('A', 100.0), make_record('B', 0.0), make_record('C', 50.0)]
        report = generate_report(records, {})
        notable = sections_of(report)[5]

        assert '1. A\n   Value: 100.00 RON\n   CPV: 45' in notable
        assert '2. C\n   Value: 50.00 RON' in notable
        assert '3.' not in notable
        assert '. B' not in notable

    def test_no_positive_items(self):
        report = generate_report([make_record('A', 0.0)], {})
        assert 'No items with positive values found.' in report


class TestTimeSections:
    """时间维度段落测试类"""

    def test_insufficient_time_data(self):
        records = [make_record(f'Item {index}', 1000.0) for index in range(10)]
        records.append(make_record('Dated', 1000.0, date='15/03/2023'))
        report = generate_report(records, {})

        assert 'Insufficient time data available for monthly analysis.' in report
        assert 'No time distribution data available.' in report
        assert 'Insufficient time data available for seasonal analysis.' in report
        assert 'Monthly Distribution Recommendations:' not in report
        assert 'General Procurement Excellence:' in report

    def test_monthly_section(self, dated_records):
        monthly = sections_of(generate_report(dated_records, CATEGORY_TABLE))[3]

        assert '- Peak spending month: Mar (79.0% of annual spending)' in monthly
        assert '- Lowest spending month: Nov (8.4% of annual spending)' in monthly
        assert 'Monthly spending variability:' in monthly
        assert '- Highest average value per item: Mar (62,666.67 RON/item)' in monthly

    def test_quarterly_section_lists_only_active_quarters(self, dated_records):
        quarterly = sections_of(generate_report(dated_records, CATEGORY_TABLE))[4]

        assert 'Q1 : 188,000.00 RON (78.99%)' in quarterly
        assert 'Q3 : 30,000.00 RON (12.61%)' in quarterly
        assert 'Q4 : 20,000.00 RON (8.40%)' in quarterly
        assert 'Q2' not in quarterly

    def test_dates_without_months(self):
        records = [make_record('A', 100.0, date='n/a'), make_record('B', 50.0, date='TBD')]
        report = generate_report(records, {})

        assert 'Insufficient monthly time data available for analysis.' in report
        assert 'No quarterly time data available for analysis.' in report
        assert 'No seasonal data available for analysis.' in report

    def test_seasonal_section(self, dated_records):
        seasonal = sections_of(generate_report(dated_records, CATEGORY_TABLE))[7]

        assert '- Peak procurement season: Spring (79.0% of annual value)' in seasonal
        assert '- Lowest procurement season: Autumn (8.4% of annual value)' in seasonal
        assert '- Winter' not in seasonal
        assert '- Summer: 30,000.00 RON average per item' in seasonal

    def test_single_active_season_skips_variability(self):
        records = [make_record('A', 100.0, date='15/03/2023'), make_record('B', 50.0, date='15/04/2023')]
        seasonal = sections_of(generate_report(records, {}))[7]
        assert 'Seasonal variability' not in seasonal


class TestRecommendations:
    """策略建议段落测试类"""

    def test_peak_month_warning(self, dated_records):
        recommendations = sections_of(generate_report(dated_records, CATEGORY_TABLE))[8]

        assert recommendations.index('Monthly Distribution Recommendations:') < recommendations.index(
            'General Procurement Excellence:'
        )
        assert '- Peak spending in Mar (79.0% of annual procurement)' in recommendations

    def test_no_warning_for_even_spending(self):
        records = [make_record(f'Item {month}', 100.0, date=f'15/{month:02d}/2023') for month in range(1, 13)]
        recommendations = sections_of(generate_report(records, {}))[8]

        assert 'Monthly Distribution Recommendations:' not in recommendations
        assert recommendations.count('\n- ') == 5


class TestFinancingSources:
    """资金来源段落测试类"""

    def test_sources_sorted_by_value(self, dated_records):
        financing = sections_of(generate_report(dated_records, CATEGORY_TABLE))[6]
        lines = financing.splitlines()[2:5]

        assert lines == [
            'Buget local: 128,000.00 RON (53.8%, 2 items)',
            'Unknown: 60,000.00 RON (25.2%, 1 items)',
            'Fonduri UE: 50,000.00 RON (21.0%, 2 items)',
        ]
