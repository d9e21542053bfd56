from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from places.parser import parse_places
from places.types import PlaceRecord
from sources.errors import CampusMapError, EmptyDataset
from sources.resolver import ContentResolver, Provenance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadComplete:
    records: list[PlaceRecord]
    provenance: Provenance


@dataclass(frozen=True)
class LoadFailed:
    error: CampusMapError


LoadOutcome = Union[LoadComplete, LoadFailed]


async def load_places(resolver: ContentResolver) -> LoadOutcome:
    """
    Resolve the markup, parse it and reject an empty dataset.

    Never raises for acquisition or markup problems: those come back as `LoadFailed`
    so the caller can fall back to the default map.
    """
    try:
        result = await resolver.resolve()
        records = parse_places(result.payload)
        if not records:
            raise EmptyDataset(f"No place found in {result.provenance.label}")
    except CampusMapError as e:
        logger.error("Loading places failed: %s", e)
        return LoadFailed(error=e)

    logger.info("%d places loaded from %s", len(records), result.provenance.label)
    return LoadComplete(records=records, provenance=result.provenance)
