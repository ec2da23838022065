from .user import User
from .cat_session import CatSession
from .cat_stats import CatStats
from .activity import Activity, CatAction
from .wallet_connection import WalletConnection
from .log_entry import LogEntry, LogLevel

__all__ = [
    "User",
    "CatSession",
    "CatStats",
    "Activity",
    "CatAction",
    "WalletConnection",
    "LogEntry",
    "LogLevel",
]
