from fastapi import Request
from sqlalchemy.orm import Session

from charitybox.core.config import Settings
from charitybox.services.display import DisplayMessageStore


def get_db(request: Request):
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_display_store(request: Request) -> DisplayMessageStore:
    return request.app.state.display
