# Application Stats Package
from .aggregator import fold_session, reset_today, rollover_if_new_day

__all__ = ["fold_session", "reset_today", "rollover_if_new_day"]
