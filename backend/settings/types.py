from __future__ import annotations

from pydantic import BaseModel, Field


class CampusCenter(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)


class CampusView(BaseModel):
    center: CampusCenter
    zoom: float = Field(ge=0.0, le=24.0)


class CampusSources(BaseModel):
    """
    The three acquisition tiers, tried in this order.

    Local entries are repo-relative paths; the remote entry is an http(s) URL.
    """

    localArchive: str
    localFallback: str
    remoteUrl: str
    remoteTimeoutS: float = Field(default=30.0, gt=0.0)


class CampusCategoryColors(BaseModel):
    batiment: str = "#3b82f6"
    vert: str = "#22c55e"
    restaurant: str = "#ef4444"
    parking: str = "#f97316"
    service: str = "#a855f7"
    default: str = "#6b7280"

    def as_dict(self) -> dict[str, str]:
        return self.model_dump()


class CampusMarkerStyle(BaseModel):
    radius: int = Field(default=12, ge=1)
    strokeColor: str = "#ffffff"
    strokeWidth: int = Field(default=3, ge=0)
    labelColor: str = "#000000"
    labelSize: int = Field(default=12, ge=1)
    labelFamily: str = "Roboto, sans-serif"


class CampusFit(BaseModel):
    paddingPx: int = Field(default=100, ge=0)
    maxZoom: float = Field(default=18.0, ge=0.0, le=24.0)


class CampusPopup(BaseModel):
    targetZoom: float = Field(default=19.0, ge=0.0, le=24.0)
    offsetY: int = -20


class CampusList(BaseModel):
    previewChars: int = Field(default=60, ge=1)
    unnamedLabel: str = "Lieu sans nom"
    emptyMessage: str = "Aucun lieu trouvé"
    errorMessage: str = "Impossible de charger les données."
    errorDetail: str = "Affichage de la position par défaut."


class CampusViewport(BaseModel):
    width: int = Field(default=900, gt=0)
    height: int = Field(default=600, gt=0)


class CampusOrientation(BaseModel):
    maxPortraitWidth: int = Field(default=768, gt=0)
    dismissKey: str = "orientationWarningDismissed"


class CampusConfig(BaseModel):
    id: str
    title: str
    institutionName: str
    initialView: CampusView
    # Used by the default-map fallback when no dataset could be loaded.
    fallbackView: CampusView
    sources: CampusSources
    colors: CampusCategoryColors = Field(default_factory=CampusCategoryColors)
    markers: CampusMarkerStyle = Field(default_factory=CampusMarkerStyle)
    fit: CampusFit = Field(default_factory=CampusFit)
    popup: CampusPopup = Field(default_factory=CampusPopup)
    list: CampusList = Field(default_factory=CampusList)
    viewport: CampusViewport = Field(default_factory=CampusViewport)
    orientation: CampusOrientation = Field(default_factory=CampusOrientation)
    mapStyle: str = "open-street-map"
