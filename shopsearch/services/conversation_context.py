"""
Conversation state kept per shopper session
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, Optional

from shopsearch.core.config import settings
from shopsearch.schemas.query import ConversationInsights, QueryEntities

logger = logging.getLogger(__name__)


@dataclass
class ConversationTurn:
    """One shopper query and what the engine answered"""

    query: str
    entities: QueryEntities
    product_ids: List[str] = field(default_factory=list)
    intent: str = "search"
    timestamp: datetime = field(default_factory=datetime.now)


class ConversationState:
    """
    Bounded ring buffer of recent turns.

    When full, the oldest turn is evicted first. Only the queries of the most
    recent turns are consulted when scoring, via recent_queries().
    """

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity or settings.conversation_capacity
        self.turns: Deque[ConversationTurn] = deque(maxlen=self.capacity)
        self.current_topic: Optional[str] = None
        self.sentiment: str = "neutral"
        self.confidence: float = 0.0

    def __len__(self) -> int:
        return len(self.turns)

    def add_turn(
        self,
        query: str,
        entities: QueryEntities,
        product_ids: List[str],
        intent: str = "search",
        confidence: float = 0.0,
        sentiment: str = "neutral",
    ) -> ConversationTurn:
        """Record a completed turn and refresh the conversation summary."""
        turn = ConversationTurn(
            query=query,
            entities=entities,
            product_ids=list(product_ids),
            intent=intent,
        )
        self.turns.append(turn)

        self.current_topic = entities.categories[0] if entities.categories else None
        self.sentiment = sentiment
        self.confidence = confidence
        logger.debug(
            f"Conversation turn recorded: intent={intent}, "
            f"products={len(turn.product_ids)}, size={len(self.turns)}"
        )
        return turn

    def recent_queries(self, limit: Optional[int] = None) -> List[str]:
        """Queries of the last `limit` turns, oldest first."""
        limit = limit if limit is not None else settings.context_turns
        if limit <= 0:
            return []
        return [turn.query for turn in list(self.turns)[-limit:]]

    def clear(self) -> None:
        self.turns.clear()
        self.current_topic = None
        self.sentiment = "neutral"
        self.confidence = 0.0

    def insights(self) -> ConversationInsights:
        return ConversationInsights(
            current_topic=self.current_topic,
            sentiment=self.sentiment,
            confidence=self.confidence,
            context_size=len(self.turns),
        )
