"""AreaMeasure core: shapes, calibration and hit testing for image measurement."""
from .calibration import (
    UNCALIBRATED,
    CalibrationEngine,
    CalibrationOutcome,
    CalibrationResult,
    CalibrationSnapshot,
    CalibrationState,
    NumericPrompt,
    ScriptedPrompt,
    cancelling_prompt,
)
from .display import DisplayScale
from .errors import ContractViolation
from .figures import Figure, FigureArena, FigureHandle, RenderRole
from .labels import MessageCatalog
from .ruler import RulerContent, choose
from .selection import EMPTY_SELECTION, Locus, Selection, find_selection
from .session import FigureLabel, MeasureSession, RenderItem
from .settings import MeasureSettings, load_settings
from .shapes import Correctness, Dimensionality, Shape, ShapeKind

__all__ = [
    "CalibrationEngine",
    "CalibrationOutcome",
    "CalibrationResult",
    "CalibrationSnapshot",
    "CalibrationState",
    "ContractViolation",
    "Correctness",
    "Dimensionality",
    "DisplayScale",
    "EMPTY_SELECTION",
    "Figure",
    "FigureArena",
    "FigureHandle",
    "FigureLabel",
    "Locus",
    "MeasureSession",
    "MeasureSettings",
    "MessageCatalog",
    "NumericPrompt",
    "RenderItem",
    "RenderRole",
    "RulerContent",
    "ScriptedPrompt",
    "Selection",
    "Shape",
    "ShapeKind",
    "UNCALIBRATED",
    "cancelling_prompt",
    "choose",
    "find_selection",
    "load_settings",
]
