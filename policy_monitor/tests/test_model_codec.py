import numpy as np
import pytest
import rdata

from policy_monitor.core.topic_model.codec import (
    NpzModelCodec,
    RDataModelCodec,
    codec_for,
)
from policy_monitor.core.topic_model.model import StmModel
from policy_monitor.utils.exceptions import ModelFormatError


def test_npz_artifact_loads_back(tmp_path, model):
    path = tmp_path / "model.npz"
    NpzModelCodec.save(model, path)

    loaded = codec_for(path).load(path)
    assert loaded.vocab == model.vocab
    assert loaded.num_topics == 4
    assert np.allclose(loaded.log_beta, model.log_beta)
    assert loaded.vocab_index["新能源汽车"] == 2


def test_per_document_mu_is_averaged():
    mu = np.array([[1.0, 3.0], [0.0, 2.0], [-1.0, 1.0]])  # (K-1) x D
    model = StmModel.from_arrays(
        vocab=["a", "b"], log_beta=np.log(np.full((4, 2), 0.5)), mu=mu, sigma=np.eye(3)
    )
    assert model.mu.tolist() == [2.0, 1.0, 0.0]


def test_shape_mismatch_is_rejected():
    with pytest.raises(ModelFormatError, match="vocabulary"):
        StmModel.from_arrays(
            vocab=["a"], log_beta=np.zeros((3, 2)), mu=np.zeros(2), sigma=np.eye(2)
        )
    with pytest.raises(ModelFormatError, match="sigma"):
        StmModel.from_arrays(
            vocab=["a", "b"], log_beta=np.zeros((3, 2)), mu=np.zeros(2), sigma=np.eye(3)
        )


def test_model_arrays_are_read_only(model):
    with pytest.raises(ValueError):
        model.log_beta[0, 0] = 0.0


def test_unreadable_rdata_is_a_format_error(tmp_path):
    path = tmp_path / "broken.RData"
    path.write_bytes(b"not an R workspace")
    with pytest.raises(ModelFormatError):
        codec_for(path).load(path)


def test_unknown_artifact_type():
    with pytest.raises(ModelFormatError):
        codec_for("model.pkl")


# -------------------------------------
# ✅ R workspace written by save()
# -------------------------------------
def _stm_object(model):
    # the fields an stm object carries, as R lists
    return {
        "vocab": np.array(model.vocab),
        "beta": {"logbeta": [np.array(model.log_beta)]},
        "mu": {"mu": np.arange(15, dtype=float).reshape(3, 5)},  # (K-1) x D
        "sigma": np.array(model.sigma),
    }


@pytest.mark.parametrize("object_name", ["out", "stm_model"])
def test_rdata_artifact_loads(tmp_path, model, object_name):
    path = tmp_path / "tm.stm_auto.RData"
    rdata.write_rda(path, {object_name: _stm_object(model)})

    loaded = codec_for(path).load(path)

    assert isinstance(codec_for(path), RDataModelCodec)
    assert loaded.vocab == model.vocab
    assert loaded.num_topics == 4
    assert np.allclose(loaded.log_beta, model.log_beta)
    assert loaded.mu.tolist() == [2.0, 7.0, 12.0]
    assert np.allclose(loaded.sigma, np.eye(3))
    assert loaded.source == str(path)


def test_rdata_without_stm_object_is_rejected(tmp_path, model):
    path = tmp_path / "other.RData"
    rdata.write_rda(path, {"fit": _stm_object(model)})
    with pytest.raises(ModelFormatError, match="found: fit"):
        codec_for(path).load(path)


def test_rdata_object_missing_a_field_is_rejected(tmp_path, model):
    stm = _stm_object(model)
    del stm["sigma"]
    path = tmp_path / "partial.RData"
    rdata.write_rda(path, {"out": stm})
    with pytest.raises(ModelFormatError, match="sigma"):
        codec_for(path).load(path)
