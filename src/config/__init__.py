from .database import async_session_manager, get_engine
from .errors import ConfigurationError
from .settings import settings
from .table_names import TableNames

__all__ = [
    "settings",
    "get_engine",
    "async_session_manager",
    "ConfigurationError",
    "TableNames",
]
