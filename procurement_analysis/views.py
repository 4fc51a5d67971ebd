"""
采购数据分析API视图
"""
import json
import logging
import math

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from drf_spectacular.utils import OpenApiExample, extend_schema

from procurement_analysis.records import CategoryEntry, ProcurementRecord
from procurement_analysis.services import ReportGenerator, search_records
from procurement_analysis.utils.cpv_parser import CpvParser

logger = logging.getLogger(__name__)


RECORD_TEXT_FIELDS = ('initiation_date', 'completion_date', 'financing_source', 'cpv_field')


def _parse_value(raw, field_name, index):
    """金额字段：接受数字或数字字符串，拒绝负数和非数值"""
    if raw is None or raw == '':
        return 0.0
    if isinstance(raw, bool):
        raise ValueError(f'第 {index + 1} 条记录的 {field_name} 不是数值')
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f'第 {index + 1} 条记录的 {field_name} 不是数值: {raw!r}')
    if not math.isfinite(value) or value < 0:
        raise ValueError(f'第 {index + 1} 条记录的 {field_name} 必须为有限的非负数值')
    return value


def _optional_text(value):
    """文本字段：统一转为去空白的字符串，空值返回None"""
    if value is None:
        return None
    return str(value).strip() or None


def _build_record(item, index):
    if not isinstance(item, dict):
        raise ValueError(f'第 {index + 1} 条记录必须是对象')

    texts = {field_name: _optional_text(item.get(field_name)) for field_name in RECORD_TEXT_FIELDS}

    category_code = str(item.get('category_code') or '').strip()
    if not category_code and texts['cpv_field']:
        category_code = CpvParser.category_code(texts['cpv_field'])

    return ProcurementRecord(
        object_name=str(item.get('object_name') or '').strip(),
        category_code=category_code,
        value_excl_tax=_parse_value(item.get('value_excl_tax'), 'value_excl_tax', index),
        value_incl_tax=_parse_value(item.get('value_incl_tax'), 'value_incl_tax', index),
        row_number=item.get('row_number') if isinstance(item.get('row_number'), int) else index + 1,
        **texts,
    )


def _build_category_table(items):
    if not isinstance(items, list):
        raise ValueError('categories 必须是列表')

    table = {}
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not str(item.get('code') or '').strip():
            raise ValueError(f'第 {index + 1} 个分类缺少 code')
        code = str(item['code']).strip()
        table[code] = CategoryEntry(
            code=code,
            name_local=_optional_text(item.get('name_local')),
            name_english=_optional_text(item.get('name_english')),
        )
    return table


@extend_schema(
    summary="生成采购分析报表",
    description=(
        "根据提交的采购记录与可选CPV分类参照表生成九段式文本报表及辅助聚合表。"
        "金额单位为RON，日期为任意文本（支持罗马尼亚语/英语月份名及数字日期）。"
    ),
    examples=[
        OpenApiExample(
            "最小请求",
            value={
                "records": [
                    {
                        "object_name": "Lucrări de reparații",
                        "category_code": "4521",
                        "value_excl_tax": 1000,
                        "value_incl_tax": 1190,
                        "initiation_date": "15 martie 2023",
                        "financing_source": "Buget local",
                    }
                ],
                "categories": [
                    {"code": "45210000-2", "name_local": "Construcții", "name_english": "Construction"}
                ],
            },
            request_only=True,
        ),
    ],
    tags=["采购分析"],
)
@csrf_exempt
@require_http_methods(["POST"])
def api_analysis_report(request):
    """采购分析报表API - 返回报表文本与聚合表。"""
    try:
        payload = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({'success': False, 'message': '请求体不是有效的JSON'}, status=400)

    if not isinstance(payload, dict) or not isinstance(payload.get('records'), list):
        return JsonResponse({'success': False, 'message': '缺少 records 列表'}, status=400)

    max_records = settings.PROCUREMENT_ANALYSIS_CONFIG.get('MAX_API_RECORDS', 50000)
    if len(payload['records']) > max_records:
        return JsonResponse(
            {'success': False, 'message': f'记录数超过上限 {max_records}'},
            status=400,
        )

    try:
        records = [_build_record(item, index) for index, item in enumerate(payload['records'])]
        category_table = _build_category_table(payload.get('categories') or [])
    except ValueError as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=400)

    query = payload.get('search')
    if isinstance(query, str) and query.strip():
        records = search_records(records, query, category_table)

    data = ReportGenerator(records, category_table).generate_data()
    logger.info(f'API生成分析报表: {len(records)} 条记录, {len(category_table)} 个分类')

    return JsonResponse({'success': True, 'data': data})
