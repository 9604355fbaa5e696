"""
Shared engine and history store for the API process.

Route handlers receive these through FastAPI dependencies so tests can
swap in an in-memory store with app.dependency_overrides.
"""
from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.history_service import HistoryStore
from ..services.kv_store import JsonFileStore

settings = get_settings()
engine = PricingEngine(settings)
history_store = HistoryStore(JsonFileStore(settings.store_file), settings)


def get_engine() -> PricingEngine:
    return engine


def get_history_store() -> HistoryStore:
    return history_store
