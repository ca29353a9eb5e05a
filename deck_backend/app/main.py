# Outline Deck backend entrypoint: FastAPI app serving outline trees and presentation pacing.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deck_backend.app.api import login
from deck_backend.app.api import notes
from deck_backend.app.api import presentation
from deck_backend.app.api import projects
from deck_backend.app.api import register
from deck_backend.app.core.logging import configure_logging
from deck_backend.app.core.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(projects.router)
app.include_router(notes.router)
app.include_router(presentation.router)


@app.get("/")
def read_root():
    return {"app": "Outline Deck backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
