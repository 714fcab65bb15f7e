from datetime import datetime
from zoneinfo import ZoneInfo

from smarthourly.config import settings


def plant_now() -> datetime:
    """Naive wall-clock time at the plant, comparable with slot windows."""
    return datetime.now(ZoneInfo(settings.PLANT_TIMEZONE)).replace(tzinfo=None)
