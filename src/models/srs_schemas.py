"""
Request/response shapes exchanged with the API layer.

Requests are validated here; pydantic failures are re-raised as the domain
ValidationError so callers only ever see one error taxonomy.
"""

from datetime import datetime
from typing import Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from src.domain.errors import ValidationError

from .scheduling import MAX_RATING, MIN_RATING, CardStatus

MAX_NEW_CARDS_PER_SESSION = 20
MAX_REVIEW_CARDS_PER_SESSION = 100

RequestT = TypeVar("RequestT", bound=BaseModel)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class StartSessionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    set_id: str = Field(min_length=1)
    new_cards_limit: int = Field(
        default=MAX_NEW_CARDS_PER_SESSION, ge=1, le=MAX_NEW_CARDS_PER_SESSION
    )
    review_cards_limit: int = Field(
        default=MAX_REVIEW_CARDS_PER_SESSION, ge=1, le=MAX_REVIEW_CARDS_PER_SESSION
    )


class SubmitReviewRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str = Field(min_length=1)
    card_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    # strict: a rating of 4.5 or "3" is a client bug, not something to coerce
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING, strict=True)


def parse_request(model: Type[RequestT], **data) -> RequestT:
    """Build *model* from keyword data, raising the domain ValidationError."""
    try:
        return model(**data)
    except PydanticValidationError as e:
        fields: Dict[str, str] = {}
        for err in e.errors():
            name = ".".join(str(part) for part in err["loc"]) or "__root__"
            fields[name] = err["msg"]
        raise ValidationError(
            f"Invalid {model.__name__}: {', '.join(sorted(fields))}", fields
        ) from e


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class DailyLimits(BaseModel):
    new_cards: int
    reviews: int
    new_cards_remaining: int
    reviews_remaining: int


class DueCard(BaseModel):
    id: str
    set_id: str
    front: str
    back: str
    status: CardStatus
    due_at: Optional[datetime] = None


class DueCardsResponse(BaseModel):
    new_cards_available: int
    review_cards_available: int
    daily_limits: DailyLimits
    cards: List[DueCard]


class SessionCard(BaseModel):
    id: str
    front: str
    back: str
    status: CardStatus


class StartSessionResponse(BaseModel):
    session_id: str
    cards: List[SessionCard]
    total_cards: int
    new_cards: int
    review_cards: int


class ReviewResult(BaseModel):
    card_id: str
    next_review_at: datetime
    interval_days: int
    ease_factor: float
    repetitions: int
    status: CardStatus


class SessionSummary(BaseModel):
    session_id: str
    started_at: datetime
    # now for a session that is still active
    completed_at: datetime
    total_cards: int
    cards_reviewed: int
    average_rating: float
    # sparse: ratings never given are absent
    ratings_distribution: Dict[int, int]
    time_spent_seconds: int
