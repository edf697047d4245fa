"""CardStore protocol: read and update card scheduling fields."""

from typing import List, Optional, Protocol, runtime_checkable

from src.models.scheduling import CardFilter, CardOrder, CardSnapshot, SchedulingState


@runtime_checkable
class CardStore(Protocol):
    """Repository interface for card access scoped to one user."""

    async def get_card(self, card_id: str, user_id: str) -> Optional[CardSnapshot]:
        """Fetch a card owned by *user_id*.

        Returns:
            The card, or None if it does not exist or belongs to someone else.
        """
        ...

    async def update_card_scheduling(
        self, card_id: str, user_id: str, state: SchedulingState
    ) -> Optional[CardSnapshot]:
        """Persist new scheduling fields.

        Returns:
            The updated card, or None if the card is no longer visible.
        """
        ...

    async def list_cards(
        self, card_filter: CardFilter, order: CardOrder, limit: int
    ) -> List[CardSnapshot]:
        """List at most *limit* cards matching *card_filter* in *order*."""
        ...

    async def count_cards(self, card_filter: CardFilter) -> int:
        """Count cards matching *card_filter*."""
        ...
