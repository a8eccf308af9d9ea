"""Data layer: campaign quest wire format and JSON helpers."""

from .errors import DataError, DataLoadError, DataValidationError
from .quest_loader import QuestLoader

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "QuestLoader",
]
