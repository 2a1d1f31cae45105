"""Shared enums for models and API."""

from enum import Enum


class Period(str, Enum):
    """Stats aggregation period."""

    DAILY = "daily"  # Last 7 days, one bar per entry
    WEEKLY = "weekly"  # Last 4 weeks, Sunday-start weeks
    MONTHLY = "monthly"  # Last 6 months


class BmiCategory(str, Enum):
    """BMI classification (Asia-Pacific cut-offs)."""

    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class EntryMode(str, Enum):
    """What selecting a calendar day opens."""

    NEW = "new"
    EDIT = "edit"  # Edit or delete an existing entry


class Trend(str, Enum):
    """Direction of weight change over a window."""

    UP = "up"
    DOWN = "down"
    FLAT = "flat"
