import pandas as pd
import pytest

from policy_monitor import batch
from policy_monitor.batch import SCORED_RESULTS_FILENAME, run_batch

POLICY_CSV = (
    "Title,Content\n"
    "甲,人工智能，集成电路，创新\n"
    "乙,的，省，市\n"
    "丙,新能源汽车，企业，科技\n"
)


@pytest.fixture
def policy_file(tmp_path):
    path = tmp_path / "policies.csv"
    path.write_text(POLICY_CSV, encoding="utf-8")
    return path


@pytest.fixture
def quiet_main(monkeypatch, context):
    # reuse the session context and leave pytest's log handlers alone
    monkeypatch.setattr(batch, "build_context", lambda cfg: context)
    monkeypatch.setattr(batch, "setup_logging", lambda: None)


# -------------------------------------
# ✅ Batch scoring
# -------------------------------------
def test_writes_top_topics_and_group_scores(tmp_path, policy_file, context):
    written = run_batch(policy_file, tmp_path / "out", context)

    assert written["top_topics"].name == "top_10_topics.xlsx"
    assert written["scored"].name == SCORED_RESULTS_FILENAME

    top = pd.read_excel(written["top_topics"], engine="openpyxl")
    ranked = top.columns.tolist()[1:]
    assert top.columns[0] == "row_id"
    assert sorted(ranked) == ["1: 人工智能", "2: 芯片", "3: 汽车", "4: 企业创新"]
    totals = top[ranked].sum()
    assert totals.tolist() == sorted(totals.tolist(), reverse=True)
    assert top["row_id"].tolist() == [0, 2]
    assert top[ranked].sum(axis=1).tolist() == pytest.approx([1.0, 1.0])

    scored = pd.read_excel(written["scored"], engine="openpyxl")
    assert scored.columns.tolist() == ["Title", "Content", "Digital", "Industry"]
    assert scored["Title"].tolist() == ["甲", "丙"]
    assert scored.loc[0, "Digital"] > scored.loc[0, "Industry"]


def test_main_exits_zero_on_success(tmp_path, policy_file, quiet_main):
    out = tmp_path / "results"
    assert batch.main([str(policy_file), str(out)]) == 0
    assert sorted(p.name for p in out.iterdir()) == [
        SCORED_RESULTS_FILENAME,
        "top_10_topics.xlsx",
    ]


# -------------------------------------
# ❌ Unusable input
# -------------------------------------
def test_main_fails_without_content_column(tmp_path, quiet_main):
    path = tmp_path / "policies.csv"
    path.write_text("Title,Text\n甲,人工智能\n", encoding="utf-8")
    assert batch.main([str(path), str(tmp_path / "out")]) == 1
    assert not (tmp_path / "out").exists()


def test_main_fails_on_unsupported_file_type(tmp_path, quiet_main):
    path = tmp_path / "notes.txt"
    path.write_text("人工智能", encoding="utf-8")
    assert batch.main([str(path), str(tmp_path / "out")]) == 1


def test_main_fails_on_missing_file(tmp_path, quiet_main):
    assert batch.main([str(tmp_path / "absent.csv"), str(tmp_path / "out")]) == 1
