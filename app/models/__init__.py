"""ORM models - import all so Base.metadata is complete for migrations."""

from app.models.user_settings import UserSettings
from app.models.weight_record import WeightRecord

__all__ = [
    "UserSettings",
    "WeightRecord",
]
