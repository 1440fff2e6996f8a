"""
Unit tests for conversation state and the session store
"""
from datetime import datetime, timedelta

import pytest

from shopsearch.schemas.query import QueryEntities
from shopsearch.services.conversation_context import ConversationState
from shopsearch.services.session_store import Session, SessionStore


class TestConversationState:
    """Tests for the bounded turn buffer"""

    @pytest.mark.unit
    def test_add_turn(self):
        state = ConversationState()
        turn = state.add_turn(
            query="blue jacket",
            entities=QueryEntities(categories=["Jackets"]),
            product_ids=["p1"],
            intent="search",
            confidence=0.9,
            sentiment="neutral",
        )

        assert len(state) == 1
        assert turn.product_ids == ["p1"]
        assert state.current_topic == "Jackets"
        assert state.confidence == 0.9

    @pytest.mark.unit
    def test_capacity_evicts_oldest(self):
        state = ConversationState()
        for i in range(12):
            state.add_turn(query=f"query {i}", entities=QueryEntities(), product_ids=[])

        assert len(state) == 10
        assert state.turns[0].query == "query 2"

    @pytest.mark.unit
    def test_recent_queries(self):
        state = ConversationState()
        for i in range(7):
            state.add_turn(query=f"query {i}", entities=QueryEntities(), product_ids=[])

        assert state.recent_queries() == ["query 2", "query 3", "query 4", "query 5", "query 6"]
        assert state.recent_queries(limit=2) == ["query 5", "query 6"]
        assert state.recent_queries(limit=0) == []

    @pytest.mark.unit
    def test_recent_queries_when_empty(self):
        assert ConversationState().recent_queries() == []

    @pytest.mark.unit
    def test_product_ids_are_copied(self):
        state = ConversationState()
        product_ids = ["p1"]
        state.add_turn(query="q", entities=QueryEntities(), product_ids=product_ids)
        product_ids.append("p2")

        assert state.turns[0].product_ids == ["p1"]

    @pytest.mark.unit
    def test_clear_and_insights(self):
        state = ConversationState(capacity=3)
        state.add_turn(
            query="red dress",
            entities=QueryEntities(categories=["Dresses"]),
            product_ids=["p2"],
            sentiment="positive",
        )

        insights = state.insights()
        assert insights.current_topic == "Dresses"
        assert insights.sentiment == "positive"
        assert insights.context_size == 1

        state.clear()
        assert len(state) == 0
        assert state.insights().current_topic is None


class TestSessionStore:
    """Tests for session lifecycle"""

    @pytest.mark.unit
    def test_get_or_create_returns_same_session(self):
        store = SessionStore()

        first = store.get_or_create("abc")
        second = store.get_or_create("abc")

        assert first is second
        assert len(store) == 1

    @pytest.mark.unit
    def test_sessions_do_not_share_state(self):
        store = SessionStore()

        first = store.get_or_create("one")
        second = store.get_or_create("two")

        assert first.profile is not second.profile
        assert first.conversation is not second.conversation

    @pytest.mark.unit
    def test_expired_session_is_replaced(self):
        store = SessionStore(session_ttl_hours=1)
        session = store.get_or_create("abc")
        session.last_updated = datetime.now() - timedelta(hours=2)

        assert store.get_or_create("abc") is not session

    @pytest.mark.unit
    def test_end_session(self):
        store = SessionStore()
        session = store.get_or_create("abc")
        session.conversation.add_turn(query="q", entities=QueryEntities(), product_ids=[])

        assert store.end_session("abc") is True
        assert store.get("abc") is None
        assert len(session.conversation) == 0
        assert store.end_session("abc") is False

    @pytest.mark.unit
    def test_cleanup_expired(self):
        store = SessionStore(session_ttl_hours=1)
        stale = store.get_or_create("stale")
        store.get_or_create("fresh")
        stale.last_updated = datetime.now() - timedelta(hours=3)

        assert store.cleanup_expired() == 1
        assert store.get("stale") is None
        assert store.get("fresh") is not None

    @pytest.mark.unit
    def test_touch_updates_timestamp(self):
        session = Session(session_id="abc")
        session.last_updated = datetime.now() - timedelta(hours=1)

        session.touch()

        assert datetime.now() - session.last_updated < timedelta(minutes=1)
