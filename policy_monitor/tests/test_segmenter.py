import math

import pytest

from policy_monitor.core.segmentation.config import SegmentationConfig
from policy_monitor.core.segmentation.segmenter import JiebaSegmenter


@pytest.fixture(scope="module")
def segmenter(tmp_path_factory):
    user_dict = tmp_path_factory.mktemp("seg") / "add_word.txt"
    user_dict.write_text("中国制造2025 1000000\n新型研发机构 1000000\n", encoding="utf-8")
    return JiebaSegmenter(
        SegmentationConfig(
            user_dict_path=user_dict,
            stopwords=frozenset({"的", "和"}),
            excluded_tokens=frozenset({"个"}),
        )
    )


def test_user_dictionary_words_stay_whole(segmenter):
    tokens = segmenter.segment("建设新型研发机构，落实中国制造2025。")
    assert "新型研发机构" in tokens
    assert "中国制造2025" in tokens


def test_stopwords_and_punctuation_dropped(segmenter):
    tokens = segmenter.segment("人工智能的发展和应用。")
    assert "人工智能" in tokens
    assert "的" not in tokens
    assert "和" not in tokens
    assert "。" not in tokens


def test_excluded_single_characters_dropped(segmenter):
    assert "个" not in segmenter.segment("个，企业")


def test_whitespace_never_becomes_a_token(segmenter):
    assert all(t.strip() for t in segmenter.segment("科技  创新 \n 企业"))


@pytest.mark.parametrize("missing", [None, math.nan])
def test_missing_text_gives_no_tokens(segmenter, missing):
    assert segmenter.segment(missing) == []


def test_non_string_is_segmented_as_text(segmenter):
    assert segmenter.segment(2025) == ["2025"]
