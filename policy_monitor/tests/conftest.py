import pytest
from fastapi.testclient import TestClient

from policy_monitor.core.config import Settings
from policy_monitor.core.topic_model.codec import NpzModelCodec
from policy_monitor.core.topic_model.model import StmModel
from policy_monitor.main import create_app
from policy_monitor.middlewares.security import limiter
from policy_monitor.services.context import build_context
from policy_monitor.tests.factories import LABELS, make_model, write_resources


@pytest.fixture(scope="session")
def model() -> StmModel:
    return make_model()


@pytest.fixture(scope="session")
def test_settings(tmp_path_factory, model) -> Settings:
    data_dir = write_resources(tmp_path_factory.mktemp("data"))
    NpzModelCodec.save(model, data_dir / "model.npz")
    return Settings(
        DATA_DIR=data_dir,
        MODEL_DIR=data_dir,
        MODEL_FILENAME="model.npz",
        MODEL_URL="http://example.invalid/model.npz",
        NUM_TOPICS=len(LABELS),
    )


@pytest.fixture(scope="session")
def context(test_settings):
    # jieba builds its prefix dictionary once per tokenizer; share it
    return build_context(test_settings)


@pytest.fixture
def client(context):
    limiter.reset()
    app = create_app(context=context)
    with TestClient(app) as c:
        yield c
