from __future__ import annotations

import re
import unicodedata
from typing import Callable

from places.types import Category, PlaceRecord

Predicate = Callable[[str], bool]


def _contains_any(*needles: str) -> Predicate:
    def match(name: str) -> bool:
        return any(n in name for n in needles)

    return match


# "ru" (restaurant universitaire) counts only when a space or tab follows it.
_RU_TOKEN = re.compile(r"ru[ \t]")


def _restaurant(name: str) -> bool:
    return _contains_any("restaurant", "cafet", "cantine")(name) or bool(
        _RU_TOKEN.search(name)
    )


# Evaluated top to bottom, first match wins.
CATEGORY_RULES: tuple[tuple[Predicate, Category], ...] = (
    (_restaurant, Category.restaurant),
    (_contains_any("parking", "park"), Category.parking),
    (_contains_any("jardin", "parc", "vert"), Category.green),
    (_contains_any("biblio", "admin", "scolarité", "scolarite"), Category.service),
    (
        _contains_any("bâtiment", "bât", "batiment", "salle", "amphi", "hall"),
        Category.building,
    ),
)

DEFAULT_COLOR = "#6b7280"


def classify(name: str | None) -> Category:
    lowered = unicodedata.normalize("NFC", name or "").lower()
    if not lowered.strip():
        return Category.default
    for predicate, category in CATEGORY_RULES:
        if predicate(lowered):
            return category
    return Category.default


def _palette_color(category: Category, colors: dict[str, str]) -> str:
    return colors.get(category.value) or colors.get(Category.default.value) or DEFAULT_COLOR


def color_for(name: str | None, colors: dict[str, str]) -> str:
    return _palette_color(classify(name), colors)


def place_category(place: PlaceRecord) -> Category:
    # Synthetic places carry a fixed category; parsed ones derive it from the name.
    return place.category or classify(place.name)


def place_color(place: PlaceRecord, colors: dict[str, str]) -> str:
    return _palette_color(place_category(place), colors)
