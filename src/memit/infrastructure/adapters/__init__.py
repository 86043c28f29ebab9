# Infrastructure Adapters Package
from .json_store import (
    JsonDeckStore,
    JsonGlobalStatsStore,
    MemoryDeckStore,
    MemoryGlobalStatsStore,
)

__all__ = ["JsonDeckStore", "JsonGlobalStatsStore", "MemoryDeckStore", "MemoryGlobalStatsStore"]
