"""Shared API dependencies."""

from zoneinfo import ZoneInfo

from fastapi import Request

from app.config import Settings
from app.core.database import get_db


def get_settings(request: Request) -> Settings:
    """Settings of the running application instance."""
    return request.app.state.settings


def get_business_tz(request: Request) -> ZoneInfo:
    return request.app.state.settings.tz


__all__ = ["get_db", "get_settings", "get_business_tz"]
