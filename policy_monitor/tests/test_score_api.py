import io

import pandas as pd
import pytest

from policy_monitor.core.file_handler.codec import ExcelCodec

NOISE_CSV = "Title,Content\n甲,的，省，市\n乙,2025\n"

POLICY_CSV = (
    "Title,Content\n"
    "甲,人工智能，集成电路，创新\n"
    "乙,的，省，市\n"
    "丙,新能源汽车，企业，科技\n"
)


def generate_csv(content: str) -> io.BytesIO:
    return io.BytesIO(content.encode("utf-8"))


def upload(client, content: str = POLICY_CSV, filename: str = "policies.csv"):
    return client.post(
        "/api/score/",
        files={"file": (filename, generate_csv(content), "text/csv")},
    )


@pytest.fixture
def scored(client):
    response = upload(client)
    assert response.status_code == 200
    return response.json()["data"]


# -------------------------------------
# ✅ Upload and score
# -------------------------------------
def test_upload_scores_rows_and_reports_dropped(scored):
    assert scored["record_count"] == 3
    assert scored["scored_count"] == 2
    assert scored["dropped_row_ids"] == [1]
    assert scored["filename"] == "policies.csv"
    assert [r["Title"] for r in scored["preview"]] == ["甲", "乙", "丙"]


def test_xlsx_upload_is_accepted(client):
    df = pd.DataFrame({"Content": ["人工智能，创新", "企业，科技"]})
    response = client.post(
        "/api/score/",
        files={
            "file": (
                "policies.xlsx",
                io.BytesIO(ExcelCodec().to_bytes(df)),
                ExcelCodec.media_type,
            )
        },
    )
    assert response.status_code == 200
    assert response.json()["data"]["scored_count"] == 2


def test_download_aligns_scores_with_surviving_rows(client, scored):
    response = client.get(f"/api/score/{scored['result_id']}/download")

    assert response.status_code == 200
    assert response.headers["content-type"] == ExcelCodec.media_type
    assert "policy_scored_" in response.headers["content-disposition"]

    df = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")
    assert df["Title"].tolist() == ["甲", "丙"]
    topic_cols = ["1: 人工智能", "2: 芯片", "3: 汽车", "4: 企业创新"]
    assert df.columns.tolist() == ["Title", "Content"] + topic_cols
    assert df[topic_cols].sum(axis=1).tolist() == pytest.approx([1.0, 1.0])
    assert df.loc[0, topic_cols].astype(float).idxmax() in ("1: 人工智能", "2: 芯片")
    assert df.loc[1, topic_cols].astype(float).idxmax() in ("3: 汽车", "4: 企业创新")


def test_uploaded_column_named_like_a_score_is_kept_apart(client):
    response = upload(
        client, "Content,1: 人工智能,Digital\n人工智能，创新,原值,旧分组\n"
    )
    rid = response.json()["data"]["result_id"]

    by_topic = pd.read_excel(
        io.BytesIO(client.get(f"/api/score/{rid}/download").content), engine="openpyxl"
    )
    assert by_topic.columns.tolist()[:3] == [
        "Content",
        "1: 人工智能 (uploaded)",
        "Digital",
    ]
    assert by_topic["1: 人工智能 (uploaded)"].tolist() == ["原值"]
    assert by_topic["1: 人工智能"].dtype.kind == "f"
    assert len(set(by_topic.columns)) == len(by_topic.columns)

    by_group = pd.read_excel(
        io.BytesIO(client.get(f"/api/score/{rid}/download?by=group").content),
        engine="openpyxl",
    )
    assert by_group.columns.tolist() == [
        "Content",
        "1: 人工智能",
        "Digital (uploaded)",
        "Digital",
        "Industry",
    ]
    assert by_group["Digital (uploaded)"].tolist() == ["旧分组"]


def test_download_by_group(client, scored):
    response = client.get(f"/api/score/{scored['result_id']}/download?by=group")
    df = pd.read_excel(io.BytesIO(response.content), engine="openpyxl")

    assert df.columns.tolist() == ["Title", "Content", "Digital", "Industry"]
    assert df.loc[0, "Digital"] > df.loc[0, "Industry"]
    assert df.loc[1, "Industry"] > df.loc[1, "Digital"]


# -------------------------------------
# ✅ Views
# -------------------------------------
def test_preview(client, scored):
    body = client.get(f"/api/score/{scored['result_id']}/preview").json()
    assert body["status"] == "success"
    assert len(body["data"]) == 3


def test_top_topics_ranked(client, scored):
    data = client.get(f"/api/score/{scored['result_id']}/topics").json()["data"]
    weights = [t["total_weight"] for t in data]

    assert len(data) == 4
    assert weights == sorted(weights, reverse=True)
    assert sum(weights) == pytest.approx(2.0)
    assert all(t["label"].startswith(f"{t['topic']}: ") for t in data)
    assert {t["group"] for t in data} == {"Digital", "Industry"}


def test_groups_sum_to_scored_rows(client, scored):
    data = client.get(f"/api/score/{scored['result_id']}/groups").json()["data"]
    assert {g["group"] for g in data} == {"Digital", "Industry"}
    assert sum(g["total_weight"] for g in data) == pytest.approx(2.0)


def test_chart_is_png(client, scored):
    response = client.get(f"/api/score/{scored['result_id']}/topics/chart")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content.startswith(b"\x89PNG")


def test_batch_with_no_known_tokens_still_succeeds(client):
    data = upload(client, NOISE_CSV).json()["data"]
    assert data["scored_count"] == 0
    assert data["dropped_row_ids"] == [0, 1]

    rid = data["result_id"]
    assert client.get(f"/api/score/{rid}/topics").json()["data"] == []
    assert client.get(f"/api/score/{rid}/groups").json()["data"] == []

    df = pd.read_excel(
        io.BytesIO(client.get(f"/api/score/{rid}/download").content), engine="openpyxl"
    )
    assert df.empty
    assert df.columns.tolist()[:2] == ["Title", "Content"]


# -------------------------------------
# ❌ Invalid uploads and lookups
# -------------------------------------
def test_upload_missing_content_column(client):
    response = upload(client, "Title,Text\n甲,人工智能\n")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "MISSING_CONTENT_COLUMN"
    assert "Content" in response.json()["error"]["message"]


def test_upload_wrong_file_type(client):
    response = upload(client, "人工智能", filename="notes.txt")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_FILE_TYPE"


def test_upload_header_only(client):
    response = upload(client, "Title,Content\n")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "EMPTY_FILE"


def test_unknown_result_id(client):
    response = client.get("/api/score/does-not-exist/topics")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "RESULT_NOT_FOUND"


def test_download_rejects_unknown_mode(client, scored):
    response = client.get(f"/api/score/{scored['result_id']}/download?by=sector")
    assert response.status_code == 422


# -------------------------------------
# ✅ Service endpoints
# -------------------------------------
def test_model_info(client):
    data = client.get("/api/model").json()["data"]
    assert data["num_topics"] == 4
    assert data["vocab_size"] == 6
    assert data["groups"] == ["Digital", "Industry"]


def test_health_probes(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/liveness").status_code == 204
    assert client.get("/readiness").json() == {"status": "ready"}


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
