"""FastAPI application for the watch reference matching API."""

from fastapi import FastAPI

from watch_match.api.routes.health import router as health_router
from watch_match.api.routes.matching import router as matching_router

app = FastAPI(title="Watch Reference Matching API", version="0.1.0")

app.include_router(health_router)
app.include_router(matching_router)
