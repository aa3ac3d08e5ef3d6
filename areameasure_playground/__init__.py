"""PySide6 front-end for AreaMeasure."""
