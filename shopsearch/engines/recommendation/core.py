"""
Search Engine Core

Main orchestration class for query processing and personalized recommendations.
"""
import logging
import threading
from datetime import datetime
from typing import Any, Iterable, List, Optional

from shopsearch.core.config import settings
from shopsearch.engines.recommendation.ranking_service import MultiSignalRanker
from shopsearch.engines.recommendation.response_builder import ResponseBuilder
from shopsearch.engines.recommendation.schemas import ScoredProduct, SearchResponse
from shopsearch.engines.recommendation.search_service import SearchService
from shopsearch.engines.recommendation.vectorizer import IndexUnavailableError, SearchIndex
from shopsearch.schemas.catalog import InteractionEvent
from shopsearch.services.catalog_service import CatalogParseResult, parse_catalog
from shopsearch.services.nlp_processor import (
    EntityExtractor,
    IntentClassifier,
    analyze_sentiment,
    entity_extractor,
    intent_classifier,
)
from shopsearch.services.session_store import Session

logger = logging.getLogger(__name__)


class SearchEngine:
    """
    Main Search Engine

    Owns the current SearchIndex and runs the query pipeline:
    entity extraction and intent classification, candidate retrieval
    (attention + TF-IDF), multi-signal ranking, response text, and the
    session update. Session state is passed in explicitly; the engine keeps
    no per-shopper state of its own.
    """

    def __init__(
        self,
        extractor: Optional[EntityExtractor] = None,
        classifier: Optional[IntentClassifier] = None,
        search_service: Optional[SearchService] = None,
        ranker: Optional[MultiSignalRanker] = None,
        response_builder: Optional[ResponseBuilder] = None,
    ):
        self.extractor = extractor or entity_extractor
        self.classifier = classifier or intent_classifier
        self.search_service = search_service or SearchService()
        self.ranker = ranker or MultiSignalRanker()
        self.response_builder = response_builder or ResponseBuilder()

        self._index: Optional[SearchIndex] = None
        self._rebuild_lock = threading.Lock()

        logger.info("SearchEngine initialized with all services")

    @property
    def index(self) -> Optional[SearchIndex]:
        return self._index

    def rebuild_index(self, catalog: Optional[Iterable[Any]]) -> CatalogParseResult:
        """
        Replace the search index with one built from a new catalog snapshot.

        Invalid records are skipped (and logged). The new index is built
        completely before it replaces the old one.

        Raises:
            IndexUnavailableError: if catalog is None; the previous index stays active
        """
        if catalog is None:
            raise IndexUnavailableError("Catalog snapshot is missing; keeping the previous index")

        with self._rebuild_lock:
            parsed = parse_catalog(catalog)
            index = SearchIndex.build(parsed.products)
            self._index = index

        if parsed.skipped:
            logger.warning(f"Index rebuilt without {parsed.skipped} invalid catalog records")
        return parsed

    def process_query(
        self,
        query: str,
        session: Optional[Session] = None,
        limit: Optional[int] = None,
    ) -> SearchResponse:
        """
        Turn a shopper query into ranked products and a response.

        Args:
            query: Raw query text
            session: Shopper session; its conversation biases retrieval and
                both its conversation and profile are updated afterwards
            limit: Maximum number of products returned

        Returns:
            SearchResponse (empty but valid when nothing matches)
        """
        limit = limit if limit is not None else settings.default_result_limit
        query = query or ""
        start_time = datetime.now()

        entities = self.extractor.extract(query)
        classification = self.classifier.classify(query)
        intent = classification.primary
        sentiment = analyze_sentiment(query)

        index = self._index
        if index is None:
            logger.warning("Query received before a search index was built")
            return SearchResponse(
                query=query,
                response=self.response_builder.build_no_results(entities),
                entities=entities,
                intent=intent,
                matched_intents=classification.matches,
                sentiment=sentiment,
                strategy="index_unavailable",
            )

        if session is not None:
            with session.lock:
                response = self._run_pipeline(query, index, entities, classification, sentiment, limit, session)
                self._update_session(session, query, response)
        else:
            response = self._run_pipeline(query, index, entities, classification, sentiment, limit, None)

        processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"Query processed: intent={intent.label}, found={response.total_found}, "
            f"returned={len(response.products)} (processing time: {processing_time:.3f}s)"
        )
        return response

    def _run_pipeline(self, query, index, entities, classification, sentiment, limit, session) -> SearchResponse:
        context_queries = session.conversation.recent_queries() if session is not None else []

        candidates, signals = self.search_service.retrieve_candidates(query, index, context_queries)
        ranked = self.ranker.rank(candidates, entities, classification.primary, signals)
        results = ranked[:limit]

        return SearchResponse(
            query=query,
            products=results,
            response=self.response_builder.build(results, entities, classification.primary),
            entities=entities,
            intent=classification.primary,
            matched_intents=classification.matches,
            sentiment=sentiment,
            total_found=len(ranked),
        )

    @staticmethod
    def _update_session(session: Session, query: str, response: SearchResponse) -> None:
        session.conversation.add_turn(
            query=query,
            entities=response.entities,
            product_ids=response.product_ids,
            intent=response.intent.label,
            confidence=response.intent.confidence,
            sentiment=response.sentiment,
        )
        if query.strip():
            session.profile.track(InteractionEvent(type="search", query=query))
        session.touch()

    def track_interaction(self, session: Session, event: InteractionEvent) -> None:
        """Apply a view or search event to the session's profile"""
        with session.lock:
            session.profile.track(event)
            session.touch()

    def semantic_search(self, query: str, top_k: int = 10, expand: bool = False) -> List[ScoredProduct]:
        """Plain TF-IDF search over the current index"""
        index = self._index
        if index is None:
            logger.warning("Semantic search requested before a search index was built")
            return []
        return self.search_service.semantic_search(query, index, top_k=top_k, expand=expand)

    def personalized_search(
        self,
        query: str,
        session: Session,
        top_k: int = 10,
        expand: bool = False,
    ) -> List[ScoredProduct]:
        """
        Semantic search re-ranked by the session's preferences.

        The top 2 * top_k semantic results are re-scored with the profile's
        recommendation score; equal scores keep their semantic order.
        """
        semantic_results = self.semantic_search(query, top_k=top_k * 2, expand=expand)

        reranked = []
        with session.lock:
            for item in semantic_results:
                preference = session.profile.recommendation_score(item.product)
                reranked.append(
                    ScoredProduct(
                        product=item.product,
                        score=preference,
                        breakdown={**item.breakdown, "preference": preference},
                    )
                )

        reranked.sort(key=lambda item: -item.score)
        return reranked[:top_k]

    def recommend(self, session: Session, count: int = 5) -> List[ScoredProduct]:
        """Score the whole catalog against the session's preferences"""
        index = self._index
        if index is None:
            logger.warning("Recommendations requested before a search index was built")
            return []

        with session.lock:
            scored = [
                ScoredProduct(product=product, score=session.profile.recommendation_score(product))
                for product in index.catalog()
            ]

        scored.sort(key=lambda item: (-item.score, item.product.id))
        return scored[:count]

    def find_similar(self, product_id: str, count: int = 5) -> List[ScoredProduct]:
        """Products whose text is most similar to the given product"""
        index = self._index
        if index is None:
            logger.warning("Similar products requested before a search index was built")
            return []
        return self.search_service.find_similar(product_id, index, count=count)


# Global search engine instance
search_engine = SearchEngine()
