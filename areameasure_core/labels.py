"""User-facing strings: status line, figure labels, prompts, scale and ruler text.

The core only produces plain strings; fonts and placement belong to the
renderer. Two message tables are bundled, English and Russian.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .settings import MeasureSettings
from .shapes import Dimensionality

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "unit": "m",
        "length": "Length: {size}",
        "etalon_length": "Etalon length: {size}",
        "area": "Area: {size}",
        "etalon_area": "Etalon area: {size}",
        "self_intersecting": "Polygon must not self-intersect!",
        "etalon_tag": " [etalon]",
        "prompt_length": "Enter the etalon length ({unit}):",
        "prompt_area": "Enter the etalon area ({unit}):",
        "define_etalon": "Outline a reference object of known size",
        "uncalibrated": "Define an etalon to start measuring",
        "scale": "Scale: {percent}%",
    },
    "ru": {
        "unit": "м",
        "length": "Длина: {size}",
        "etalon_length": "Длина эталона: {size}",
        "area": "Площадь: {size}",
        "etalon_area": "Площадь эталона: {size}",
        "self_intersecting": "Многоугольник не должен самопересекаться!",
        "etalon_tag": " [эталон]",
        "prompt_length": "Укажите длину эталона ({unit}):",
        "prompt_area": "Укажите площадь эталона ({unit}):",
        "define_etalon": "Обведите объект известного размера",
        "uncalibrated": "Задайте эталон, чтобы начать измерения",
        "scale": "Масштаб: {percent}%",
    },
}


def format_number(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True)
class MessageCatalog:
    """Message table bound to a language and a unit symbol."""

    language: str = "en"
    unit_override: Optional[str] = None

    @classmethod
    def for_settings(cls, settings: MeasureSettings) -> "MessageCatalog":
        return cls(settings.language, settings.unit)

    def text(self, key: str, **kwargs) -> str:
        template = MESSAGES.get(self.language, MESSAGES["en"])[key]
        return template.format(**kwargs) if kwargs else template

    @property
    def linear_unit(self) -> str:
        return self.unit_override or self.text("unit")

    @property
    def square_unit(self) -> str:
        return self.linear_unit + "²"

    def unit_for(self, dimensionality: Dimensionality) -> str:
        if dimensionality is Dimensionality.SHAPE_1D:
            return self.linear_unit
        return self.square_unit

    def size_text(self, value: float, dimensionality: Dimensionality) -> str:
        return f"{format_number(value)} {self.unit_for(dimensionality)}"

    def status_text(self, size_text: str, dimensionality: Dimensionality, is_etalon: bool) -> str:
        if dimensionality is Dimensionality.SHAPE_1D:
            key = "etalon_length" if is_etalon else "length"
        else:
            key = "etalon_area" if is_etalon else "area"
        return self.text(key, size=size_text)

    def label_text(self, size_text: str, is_etalon: bool) -> str:
        return size_text + (self.text("etalon_tag") if is_etalon else "")

    def self_intersection_warning(self) -> str:
        return self.text("self_intersecting")

    def prompt_text(self, dimensionality: Dimensionality) -> str:
        key = "prompt_length" if dimensionality is Dimensionality.SHAPE_1D else "prompt_area"
        return self.text(key, unit=self.unit_for(dimensionality))

    def scale_text(self, scale: float) -> str:
        return self.text("scale", percent=format_number(round(scale * 100.0, 1)))

    def ruler_text(self, meters: float) -> str:
        return f"{format_number(meters)} {self.linear_unit}"


__all__ = ["MESSAGES", "MessageCatalog", "format_number"]
