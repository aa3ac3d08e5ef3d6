import json

import pytest

from areameasure_core.cli import main


def test_ruler_command(capsys):
    assert main(["ruler", "--mpp", "1"]) == 0
    assert capsys.readouterr().out.strip() == "100 m = 100.00 px"


def test_ruler_command_without_fit(capsys):
    main(["ruler", "--mpp", "1", "--max", "50", "--min", "45"])
    assert "No scale bar" in capsys.readouterr().out


def test_measure_rectangle(capsys):
    main(["measure", "--kind", "rectangle", "--points", "0,0 10,5", "--mpp", "0.5", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["area_px"] == pytest.approx(50.0)
    assert data["length_px"] == pytest.approx(30.0)
    assert data["area"] == pytest.approx(12.5)
    assert data["text"] == "12.5 m²"
    assert data["valid"] is True


def test_measure_reports_self_intersection(capsys):
    main(["measure", "--kind", "polygon", "--points", "0,0 10,10 10,0 0,10"])
    out = capsys.readouterr().out
    assert "valid: False" in out
    assert "Polygon must not self-intersect!" in out


def test_measure_rejects_bad_points():
    with pytest.raises(SystemExit):
        main(["measure", "--points", "0;0;1"])


def test_replay_command(tmp_path, capsys):
    script = {
        "answers": [5.0],
        "events": [
            {"op": "etalon"},
            {"op": "point", "at": [0, 0]},
            {"op": "point", "at": [100, 0]},
            {"op": "point", "at": [0, 50]},
            {"op": "point", "at": [40, 50]},
        ],
    }
    path = tmp_path / "script.json"
    path.write_text(json.dumps(script), encoding="utf-8")
    main(["replay", str(path), "--json"])
    report = json.loads(capsys.readouterr().out)
    assert [label["text"] for label in report["labels"]] == ["5 m [etalon]", "2 m"]
    assert report["labels"][1]["size"] == pytest.approx(2.0)


def test_replay_rejects_invalid_script(tmp_path):
    path = tmp_path / "script.json"
    path.write_text(json.dumps({"events": [{"op": "point"}]}), encoding="utf-8")
    with pytest.raises(SystemExit):
        main(["replay", str(path)])


@pytest.mark.parametrize("kind", ["segment", "rectangle"])
def test_measure_rejects_extra_points_for_two_point_kinds(kind):
    with pytest.raises(SystemExit):
        main(["measure", "--kind", kind, "--points", "0,0 10,0 20,5"])


def test_measure_omits_text_below_size_epsilon(capsys):
    main(["measure", "--kind", "segment", "--points", "0,0 1,0", "--mpp", "1e-9", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["length"] == pytest.approx(1e-9)
    assert "text" not in data
