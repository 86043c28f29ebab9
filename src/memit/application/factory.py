"""
Study Service Factory
Centralizes the wiring of stores and clock from configuration.
"""

from memit.application.config import AppConfig
from memit.application.study_service import StudyService
from memit.infrastructure.adapters.json_store import JsonDeckStore, JsonGlobalStatsStore
from memit.infrastructure.clock import SystemClock


def get_study_service(config: AppConfig) -> StudyService:
    """
    Returns a StudyService backed by JSON files in config.data_dir.
    The service still needs `await service.load()`.
    """
    return StudyService(
        deck_store=JsonDeckStore(config.data_dir),
        stats_store=JsonGlobalStatsStore(config.data_dir),
        clock=SystemClock(),
        limits=config.study_limits(),
    )
