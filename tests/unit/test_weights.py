"""Unit tests for weight tables"""

import pytest

from emotion_trainer.analysis.weights import (
    BASIC_WEIGHTS,
    TUNED_WEIGHTS,
    WeightTable,
    load_weight_table
)
from emotion_trainer.models.enums import EmotionCategory


def test_tuned_preset_covers_every_category_in_order():
    table = WeightTable.from_preset("tuned")

    assert list(table) == EmotionCategory.names()
    assert len(table) == 7
    assert dict(table["neutral"]) == {}


def test_tuned_preset_values():
    """Test a few anchor weights of the tuned table"""
    table = WeightTable.from_preset("tuned")

    assert table["happy"]["mouthSmileLeft"] == pytest.approx(1.3)
    assert table["angry"]["mouthSmileLeft"] == pytest.approx(-1.0)
    assert table["surprised"]["mouthPucker"] == pytest.approx(-0.6)
    assert table["disgusted"]["upperLipRaiseLeft"] == pytest.approx(0.7)


def test_basic_preset_loads():
    table = WeightTable.from_preset("basic")

    assert table["surprised"]["mouthOpen"] == pytest.approx(0.8)
    assert set(table) == set(BASIC_WEIGHTS)


def test_unknown_preset_rejected():
    with pytest.raises(ValueError):
        WeightTable.from_preset("experimental")


def test_table_is_immutable():
    """Test that neither the table nor its rows can be mutated"""
    table = WeightTable(TUNED_WEIGHTS)

    with pytest.raises(TypeError):
        table["happy"]["mouthSmileLeft"] = 5.0
    with pytest.raises(TypeError):
        table._table["happy"] = {}


def test_table_is_detached_from_source_dict():
    source = {"happy": {"mouthSmileLeft": 1.0}}
    table = WeightTable(source)
    source["happy"]["mouthSmileLeft"] = 9.0

    assert table["happy"]["mouthSmileLeft"] == 1.0


def test_missing_categories_get_empty_rows():
    table = WeightTable({"sad": {"mouthFrownLeft": 1.0}})

    assert list(table) == EmotionCategory.names()
    assert dict(table["happy"]) == {}


def test_unknown_category_rejected():
    with pytest.raises(ValueError, match="contempt"):
        WeightTable({"contempt": {"mouthLeft": 1.0}})


def test_neutral_weights_rejected():
    with pytest.raises(ValueError):
        WeightTable({"neutral": {"mouthClose": 1.0}})


@pytest.mark.parametrize("bad", ["1.0", None, True])
def test_non_numeric_weight_rejected(bad):
    with pytest.raises(ValueError):
        WeightTable({"happy": {"mouthSmileLeft": bad}})


def test_load_from_yaml(tmp_path):
    path = tmp_path / "weights.yaml"
    path.write_text("happy:\n  mouthSmileLeft: 2.0\nsad:\n  mouthFrownLeft: 1\n")

    table = load_weight_table(weights_path=path)

    assert table["happy"]["mouthSmileLeft"] == 2.0
    assert table["sad"]["mouthFrownLeft"] == 1.0


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "weights.yaml"
    path.write_text("- happy\n- sad\n")

    with pytest.raises(ValueError):
        WeightTable.from_yaml(path)


def test_load_weight_table_defaults_to_tuned():
    assert load_weight_table()["happy"]["mouthSmileLeft"] == pytest.approx(1.3)
