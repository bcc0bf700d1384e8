from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pickleball.config import CORS_ORIGINS
from pickleball.database import init_db
from pickleball.routes import play_dates, players, scores

app = FastAPI(title="Pickleball Round Robin API")

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]
_cors_origins.extend(CORS_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(players.router, prefix="/api", tags=["players"])
app.include_router(play_dates.router, prefix="/api", tags=["play-dates"])
app.include_router(scores.router, prefix="/api", tags=["scores"])


@app.on_event("startup")
def on_startup():
    init_db()  # Use centralized init_db() which imports models and creates tables


@app.get("/api/health")
def health_check():
    return {"app_name": "Pickleball Round Robin API", "status": "healthy"}
