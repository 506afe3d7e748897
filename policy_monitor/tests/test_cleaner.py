import pytest

from policy_monitor.core.normalization.cleaner import ChineseTextCleaner
from policy_monitor.core.normalization.config import CleaningConfig


@pytest.fixture(scope="module")
def cleaner():
    return ChineseTextCleaner(CleaningConfig(cities=("深圳", "苏州")))


# -------------------------------------
# ✅ Program name and years
# -------------------------------------
def test_program_name_keeps_its_year_while_bare_year_is_removed(cleaner):
    assert cleaner.clean("中国 制造 2025 发展 在 2025 年") == "中国制造2025 发展 在 年"


def test_program_name_already_joined(cleaner):
    assert cleaner.clean("推进 中国制造2025 实施") == "推进 中国制造2025 实施"


def test_plan_eras_and_horizon_years_removed(cleaner):
    assert cleaner.clean("十四五 规划 和 2035 远景 目标") == "规划 和 远景 目标"
    assert cleaner.clean("十三五 期间 2020 年") == "期间 年"


# -------------------------------------
# ✅ Places and administrative markers
# -------------------------------------
def test_provinces_and_cities_removed(cleaner):
    assert cleaner.clean("广东 深圳 科技 创新") == "科技 创新"
    assert cleaner.clean("广西 壮族 自治区 产业") == "产业"


def test_standalone_admin_markers_removed(cleaner):
    assert cleaner.clean("北京 市 省 区县 企业") == "企业"


def test_admin_marker_inside_word_is_kept(cleaner):
    assert cleaner.clean("城市 发展 国家 项目") == "城市 发展 国家 项目"


def test_standalone_numerals_removed(cleaner):
    assert cleaner.clean("第 三 条 十二 项目") == "第 条 项目"


def test_single_latin_letters_removed(cleaner):
    assert cleaner.clean("5G 网络 a b 技术") == "5G 网络 技术"


# -------------------------------------
# ✅ General behaviour
# -------------------------------------
@pytest.mark.parametrize(
    "text",
    [
        "中国 制造 2025 发展 在 2025 年",
        "北京 市 省 区县 企业 a b c",
        "十四五 广东 深圳 三 项 人工智能",
    ],
)
def test_clean_is_idempotent(cleaner, text):
    once = cleaner.clean(text)
    assert cleaner.clean(once) == once


def test_empty_and_none(cleaner):
    assert cleaner.clean("") == ""
    assert cleaner.clean(None) == ""


def test_only_noise_becomes_empty(cleaner):
    assert cleaner.clean("省 市 2025 十三五") == ""
