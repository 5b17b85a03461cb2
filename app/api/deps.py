from datetime import date, datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import Query

from app.core.config import settings

LimitParam = Annotated[int, Query(ge=1, le=100, description="Page size")]
OffsetParam = Annotated[int, Query(ge=0, description="Rows to skip")]


def get_service_date() -> date:
    """Today's date at the clinic; overridden in tests to pin the queue day."""
    return datetime.now(ZoneInfo(settings.clinic_timezone)).date()
