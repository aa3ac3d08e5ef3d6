import json

import pytest
from pydantic import ValidationError

from areameasure_core.labels import MessageCatalog, format_number
from areameasure_core.settings import SETTINGS_ENV_VAR, MeasureSettings, load_settings
from areameasure_core.shapes import Dimensionality


def test_defaults():
    settings = MeasureSettings()
    assert settings.radii.vertex == 8.0
    assert settings.radii.polyline == 6.0
    assert settings.radii.polygon == 2.0
    assert settings.radii.label == 2.0
    assert settings.ruler.max_pixels == 180.0
    assert settings.ruler.min_pixels == 40.0
    assert settings.default_scale in settings.scales


def test_scales_must_ascend():
    with pytest.raises(ValidationError):
        MeasureSettings(scales=[1.0, 0.5, 2.0])
    with pytest.raises(ValidationError):
        MeasureSettings(scales=[])


def test_default_scale_must_be_listed():
    with pytest.raises(ValidationError):
        MeasureSettings(scales=[0.5, 2.0], default_scale=1.0)


def test_ruler_budgets_are_ordered():
    with pytest.raises(ValidationError):
        MeasureSettings(ruler={"max_pixels": 40, "min_pixels": 180})


def test_from_file_and_environment(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"language": "ru", "radii": {"vertex": 12}}), encoding="utf-8")
    assert MeasureSettings.from_file(path).radii.vertex == 12.0
    assert load_settings().language == "en"
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(path))
    assert load_settings().language == "ru"


def test_language_defaults_unit():
    assert MessageCatalog.for_settings(MeasureSettings(language="ru")).linear_unit == "м"
    assert MessageCatalog.for_settings(MeasureSettings(unit="ft")).square_unit == "ft²"


def test_message_formatting():
    messages = MessageCatalog()
    assert format_number(2.0000000000000004) == "2"
    assert messages.size_text(12.5, Dimensionality.SHAPE_2D) == "12.5 m²"
    assert messages.scale_text(1.25) == "Scale: 125%"
    assert messages.scale_text(0.333) == "Scale: 33.3%"
    assert messages.prompt_text(Dimensionality.SHAPE_1D) == "Enter the etalon length (m):"
    assert messages.label_text("5 m", True) == "5 m [etalon]"
