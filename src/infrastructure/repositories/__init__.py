from .memory_card_store import InMemoryCardStore, InMemorySetStore
from .memory_progress_repository import InMemoryDailyProgressRepository
from .memory_session_repository import InMemorySessionRepository
from .sqlalchemy_card_store import SqlAlchemyCardStore
from .sqlalchemy_set_store import SqlAlchemySetStore

__all__ = [
    "InMemoryCardStore",
    "InMemoryDailyProgressRepository",
    "InMemorySessionRepository",
    "InMemorySetStore",
    "SqlAlchemyCardStore",
    "SqlAlchemySetStore",
]
