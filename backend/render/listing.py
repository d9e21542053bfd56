from __future__ import annotations

import re
import unicodedata
from typing import Any

from places.classify import place_category, place_color
from places.types import PlaceRecord

_TAGS = re.compile(r"<[^>]*>")


def name_sort_key(name: str | None) -> tuple[str, str]:
    """
    Case-insensitive, accent-aware ordering ("éléphant" < "Zebra").

    Accents only break ties between otherwise equal names.
    """
    folded = (name or "").casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base, folded


def sort_places(places: list[PlaceRecord]) -> list[PlaceRecord]:
    # sorted() is stable: equal names keep document order.
    return sorted(places, key=lambda p: name_sort_key(p.name))


def description_preview(description: str | None, *, max_chars: int) -> str:
    text = _TAGS.sub("", description or "")[:max_chars]
    if not text:
        return ""
    return f"{text}..." if len(text) >= max_chars else text


def list_entries(
    places: list[PlaceRecord],
    *,
    colors: dict[str, str],
    unnamed: str,
    preview_chars: int,
    selected_id: int | None = None,
) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for p in sort_places(places):
        out.append(
            {
                "id": p.id,
                "name": p.display_name(unnamed),
                "category": place_category(p).value,
                "color": place_color(p, colors),
                "preview": description_preview(p.description, max_chars=preview_chars),
                "active": p.id == selected_id,
            }
        )
    return out
