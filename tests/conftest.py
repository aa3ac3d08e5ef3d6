import pytest

from areameasure_core import MeasureSession, ScriptedPrompt
from areameasure_core.settings import SETTINGS_ENV_VAR


@pytest.fixture(autouse=True)
def _no_settings_file(monkeypatch):
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)


@pytest.fixture
def prompt():
    return ScriptedPrompt()


@pytest.fixture
def session(prompt):
    return MeasureSession(prompt=prompt)


@pytest.fixture
def calibrated_session(session, prompt):
    """Session whose etalon is the 100 px segment (0,0)-(100,0) declared as 5 m."""
    prompt.push(5.0)
    session.set_defining_etalon(True)
    session.add_point((0, 0))
    session.add_point((100, 0))
    assert session.meters_per_pixel_original == pytest.approx(0.05)
    return session
