import pytest
from pydantic import ValidationError

from areameasure_core import MeasureSession, ScriptedPrompt
from areameasure_core.replay import merged_settings, run_script
from areameasure_core.schemas import ReplayEvent, ReplayScript
from areameasure_core.settings import MeasureSettings

SCRIPT = {
    "answers": [5.0],
    "events": [
        {"op": "etalon"},
        {"op": "point", "at": [0, 0]},
        {"op": "point", "at": [100, 0]},
        {"op": "kind", "kind": "rectangle"},
        {"op": "point", "at": [0, 20]},
        {"op": "point", "at": [20, 40]},
    ],
}


def test_replay_matches_driving_the_session():
    _session, report = run_script(ReplayScript.model_validate(SCRIPT))

    direct = MeasureSession(prompt=ScriptedPrompt([5.0]))
    direct.set_defining_etalon(True)
    direct.add_point((0, 0))
    direct.add_point((100, 0))
    direct.set_shape_kind("rectangle")
    direct.add_point((0, 20))
    direct.add_point((20, 40))

    assert [label.text for label in report.labels] == [label.text for label in direct.labels()]
    assert [label.text for label in report.labels] == ["5 m [etalon]", "1 m²"]
    assert report.meters_per_pixel == pytest.approx(0.05)
    assert report.last_outcome == "applied"
    assert report.figures == 2
    assert report.ruler.text == "5 m"


def test_select_drag_and_delete_events():
    script = dict(SCRIPT)
    script["events"] = SCRIPT["events"] + [
        {"op": "select", "at": [20, 40]},
        {"op": "drag", "at": [40, 40]},
    ]
    session, report = run_script(ReplayScript.model_validate(script))
    assert report.labels[1].text == "2 m²"
    script["events"] = script["events"] + [{"op": "delete"}]
    session, report = run_script(ReplayScript.model_validate(script))
    assert report.figures == 1


def test_scale_index_and_zoom_events():
    script = {"scale_index": 0, "events": [{"op": "zoom_in"}, {"op": "zoom_in"}, {"op": "zoom_out"}]}
    _session, report = run_script(ReplayScript.model_validate(script))
    assert report.scale == 0.125
    assert report.ruler is None
    assert report.status == "Define an etalon to start measuring"


def test_settings_overrides_are_merged():
    script = ReplayScript.model_validate({"settings": {"language": "ru"}})
    session, report = run_script(script)
    assert session.settings.language == "ru"
    assert report.scale_text == "Масштаб: 100%"
    assert merged_settings(MeasureSettings(), {}) == MeasureSettings()


def test_position_events_need_a_position():
    with pytest.raises(ValidationError):
        ReplayEvent.model_validate({"op": "point"})
    with pytest.raises(ValidationError):
        ReplayEvent.model_validate({"op": "kind"})
    with pytest.raises(ValidationError):
        ReplayEvent.model_validate({"op": "jump"})
    with pytest.raises(ValidationError):
        ReplayEvent.model_validate({"op": "move", "at": [1, 2, 3]})


def test_report_lines():
    _session, report = run_script(ReplayScript.model_validate(SCRIPT))
    lines = list(report.lines())
    assert lines[0] == "Scale: 100%"
    assert "rectangle: 1 m²" in lines
