"""Web-layer helpers shared by the routers."""

from .dependencies import get_db_session, get_session_factory, parse_record_id
from .pagination import PageInfo
from .responses import fail, respond

__all__ = [
    "PageInfo",
    "fail",
    "get_db_session",
    "get_session_factory",
    "parse_record_id",
    "respond",
]
