from .card_store import CardStore
from .progress_repository import DailyProgressRepository
from .session_repository import SessionRepository
from .set_store import SetStore

__all__ = ["CardStore", "DailyProgressRepository", "SessionRepository", "SetStore"]
