from functools import lru_cache

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from api.session import CampusSession
from prefs.singleton import get_store
from settings.logs import configure_logging
from settings.registry import get_config

configure_logging()

app = FastAPI(title="Campus map")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiCenter(BaseModel):
    lat: float
    lon: float


class ApiSelect(BaseModel):
    placeId: int


class ApiClick(BaseModel):
    # Either the clicked marker's id (Plotly customdata) or a pixel to hit-test.
    placeId: int | None = None
    x: float | None = None
    y: float | None = None


class ApiView(BaseModel):
    center: ApiCenter
    zoom: float = Field(ge=0.0, le=24.0)


class ApiViewport(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)


@lru_cache(maxsize=1)
def get_session() -> CampusSession:
    return CampusSession(get_config(), store=get_store())


@app.get("/map")
async def get_map(session: CampusSession = Depends(get_session)):
    return await session.current()


@app.post("/select")
async def select(body: ApiSelect, session: CampusSession = Depends(get_session)):
    return await session.select(body.placeId)


@app.post("/click")
async def click(body: ApiClick, session: CampusSession = Depends(get_session)):
    pixel = (body.x, body.y) if body.x is not None and body.y is not None else None
    return await session.click(place_id=body.placeId, pixel=pixel)


@app.post("/popup/dismiss")
async def dismiss_popup(session: CampusSession = Depends(get_session)):
    return await session.dismiss_popup()


@app.post("/view")
async def change_view(body: ApiView, session: CampusSession = Depends(get_session)):
    return await session.change_view(
        {"lat": body.center.lat, "lon": body.center.lon}, body.zoom
    )


@app.post("/resize")
async def resize(body: ApiViewport, session: CampusSession = Depends(get_session)):
    return await session.resize(body.width, body.height)


@app.post("/orientation-warning/dismiss")
async def dismiss_orientation_warning(
    session: CampusSession = Depends(get_session),
):
    return await session.dismiss_orientation_warning()
