"""
分析数据模型

采购记录、CPV分类条目与聚合桶均为只读值对象：
每次生成报表时由调用方构造一次，分析引擎只读不写。
"""
from dataclasses import dataclass
from typing import Dict, Iterable, Optional


@dataclass(frozen=True)
class ProcurementRecord:
    """采购记录（一行采购计划数据）"""
    object_name: str
    category_code: str = ''
    value_excl_tax: float = 0.0
    value_incl_tax: float = 0.0
    initiation_date: Optional[str] = None
    completion_date: Optional[str] = None
    financing_source: Optional[str] = None
    cpv_field: Optional[str] = None
    row_number: int = 0

    def resolved_date(self) -> Optional[str]:
        """优先取启动日期，缺失时回退到完成日期"""
        if self.initiation_date:
            return self.initiation_date
        if self.completion_date:
            return self.completion_date
        return None


@dataclass(frozen=True)
class CategoryEntry:
    """CPV分类参照表条目"""
    code: str
    name_local: Optional[str] = None
    name_english: Optional[str] = None

    @property
    def division(self) -> str:
        """CPV大类（前两位）"""
        if self.code and len(self.code) >= 2:
            return self.code[:2]
        return ''


@dataclass(frozen=True)
class BucketTotal:
    """聚合桶：金额合计 + 条目数"""
    total_value: float = 0.0
    item_count: int = 0

    def add(self, value: float) -> 'BucketTotal':
        return BucketTotal(self.total_value + value, self.item_count + 1)

    @property
    def average_value(self) -> float:
        if not self.item_count:
            return 0.0
        return self.total_value / self.item_count


class Aggregate(dict):
    """
    有序聚合表：桶标签 -> BucketTotal

    月/季度/季节表按日历顺序预置全部桶；
    分类/资金来源表按首次出现顺序插入，渲染时再按金额排序。
    """

    @classmethod
    def with_buckets(cls, labels: Iterable[str]) -> 'Aggregate':
        return cls((label, BucketTotal()) for label in labels)

    def add(self, label: str, value: float) -> None:
        self[label] = self.get(label, BucketTotal()).add(value)

    @property
    def total_value(self) -> float:
        return sum(bucket.total_value for bucket in self.values())

    @property
    def total_count(self) -> int:
        return sum(bucket.item_count for bucket in self.values())

    def values_by_label(self) -> Dict[str, float]:
        return {label: bucket.total_value for label, bucket in self.items()}

    def sorted_by_value(self):
        """按金额降序，金额相同保持插入顺序"""
        return sorted(self.items(), key=lambda item: -item[1].total_value)

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {
            label: {'total_value': round(bucket.total_value, 2), 'item_count': bucket.item_count}
            for label, bucket in self.items()
        }
