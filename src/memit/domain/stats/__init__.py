# Domain Stats Package
from .models import GlobalStats, SessionStats

__all__ = ["SessionStats", "GlobalStats"]
