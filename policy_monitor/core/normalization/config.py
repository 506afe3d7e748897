from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple


def default_temporal_tokens() -> Tuple[str, ...]:
    # five-year-plan eras, then planning-horizon years ("2025" handled separately)
    return (
        "十一五",
        "十二五",
        "十三五",
        "十四五",
        "2000",
        "2005",
        "2010",
        "2015",
        "2020",
        "2030",
        "2035",
        "2040",
        "2045",
        "2050",
        "2060",
    )


def default_provinces() -> Tuple[str, ...]:
    return (
        "上海", "云南", "内蒙古", "北京", "吉林", "四川", "天津", "宁夏",
        "安徽", "山东", "山西", "广东", "广西", "新疆", "江苏", "江西",
        "河北", "河南", "浙江", "海南", "湖北", "湖南", "甘肃", "福建",
        "西藏", "贵州", "辽宁", "重庆", "陕西", "青海", "黑龙江",
        "自治区", "壮族",
    )  # fmt: skip


def default_admin_markers() -> Tuple[str, ...]:
    return ("家", "市", "区县", "达", "项", "号", "省")


@dataclass(frozen=True)
class CleaningConfig:
    temporal_tokens: Tuple[str, ...] = field(default_factory=default_temporal_tokens)
    provinces: Tuple[str, ...] = field(default_factory=default_provinces)
    cities: Tuple[str, ...] = ()
    admin_markers: Tuple[str, ...] = field(default_factory=default_admin_markers)
    protected_year: str = "2025"
    collapse_whitespace: bool = True

    @property
    def places(self) -> Tuple[str, ...]:
        return self.provinces + self.cities
