from src.models.base import Base, TimeStamp, UUIDPrimaryKey

__all__ = [
    "Base",
    "TimeStamp",
    "UUIDPrimaryKey",
]
