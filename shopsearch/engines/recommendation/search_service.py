"""
Search Service for candidate retrieval

Handles TF-IDF semantic search, attention-based candidate retrieval,
content-based similar products and query expansion.
"""
import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from shopsearch.config.rule_tables import QUERY_SYNONYMS
from shopsearch.core.config import settings
from shopsearch.engines.recommendation.attention import AttentionScorer
from shopsearch.engines.recommendation.schemas import ScoredProduct
from shopsearch.engines.recommendation.similarity import rank_by_similarity
from shopsearch.engines.recommendation.vectorizer import SearchIndex
from shopsearch.schemas.catalog import ProductRecord

logger = logging.getLogger(__name__)


class SearchService:
    """Service for finding candidate products in a search index"""

    def __init__(self, attention_scorer: Optional[AttentionScorer] = None):
        self.attention_scorer = attention_scorer or AttentionScorer()
        self.synonym_patterns = [
            (re.compile(rf"\b{re.escape(word)}\b"), synonyms) for word, synonyms in QUERY_SYNONYMS.items()
        ]

    def expand_query(self, query: str) -> str:
        """Append synonyms for known cue words, e.g. "cheap" -> "affordable budget ..." """
        query_lower = query.lower()
        expanded = query
        for pattern, synonyms in self.synonym_patterns:
            if pattern.search(query_lower):
                expanded += " " + " ".join(synonyms)
        return expanded

    def semantic_search(
        self,
        query: str,
        index: SearchIndex,
        top_k: int = 10,
        expand: bool = False,
    ) -> List[ScoredProduct]:
        """
        Rank products by cosine similarity between TF-IDF vectors.

        Args:
            query: Free-text query
            index: Index to search
            top_k: Maximum number of results
            expand: Append synonyms before vectorizing

        Returns:
            Products with similarity > 0, most similar first
        """
        text = self.expand_query(query) if expand else query
        query_vector = index.vectorize_query(text)
        ranked = rank_by_similarity(query_vector, index.vectors())

        results = [
            ScoredProduct(
                product=index.products[product_id].product,
                score=similarity,
                breakdown={"similarity": similarity},
            )
            for product_id, similarity in ranked[:top_k]
        ]

        logger.info(f"Semantic search for '{query}' matched {len(ranked)} products")
        return results

    def find_similar(self, product_id: str, index: SearchIndex, count: int = 5) -> List[ScoredProduct]:
        """Content-based neighbours of a product, excluding the product itself"""
        target = index.get(product_id)
        if target is None:
            logger.info(f"Similar products requested for unknown product {product_id}")
            return []

        corpus = {pid: vector for pid, vector in index.vectors().items() if pid != product_id}
        ranked = rank_by_similarity(target.vector, corpus)

        return [
            ScoredProduct(
                product=index.products[pid].product,
                score=similarity,
                breakdown={"similarity": similarity},
            )
            for pid, similarity in ranked[:count]
        ]

    def retrieve_candidates(
        self,
        query: str,
        index: SearchIndex,
        context_queries: Optional[Sequence[str]] = None,
        limit: Optional[int] = None,
    ) -> Tuple[List[ProductRecord], Dict[str, Dict[str, float]]]:
        """
        Build the candidate list for the ranker.

        A product is a candidate when its text overlaps the attention query
        embedding or its TF-IDF similarity to the query is positive.
        Candidates are ordered by attention score, then similarity, then id,
        and capped at `limit`.

        Returns:
            (candidates, signals) where signals maps product id to its
            attention and similarity scores
        """
        limit = limit if limit is not None else settings.candidate_pool_size

        attention = dict(self.attention_scorer.rank(query, index, context_queries))
        similarity = dict(rank_by_similarity(index.vectorize_query(query), index.vectors()))

        candidate_ids = sorted(
            attention.keys() | similarity.keys(),
            key=lambda pid: (-attention.get(pid, 0.0), -similarity.get(pid, 0.0), pid),
        )[:limit]

        candidates = [index.products[pid].product for pid in candidate_ids]
        signals = {
            pid: {
                "attention": attention.get(pid, 0.0),
                "similarity": similarity.get(pid, 0.0),
            }
            for pid in candidate_ids
        }

        logger.debug(
            f"Retrieved {len(candidates)} candidates "
            f"(attention={len(attention)}, similarity={len(similarity)})"
        )
        return candidates, signals
