"""SQLAlchemy implementation of SetStore."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.errors import StoreUnavailable
from src.models.card_set import CardSet


class SqlAlchemySetStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def verify_ownership(self, set_id: str, user_id: str) -> bool:
        try:
            result = await self._session.execute(
                select(CardSet.id).where(
                    CardSet.id == set_id, CardSet.user_id == user_id
                )
            )
        except SQLAlchemyError as e:
            raise StoreUnavailable("verify_ownership", str(e)) from e
        return result.scalar_one_or_none() is not None
