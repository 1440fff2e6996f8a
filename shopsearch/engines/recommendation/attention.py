"""
Token-level attention scoring of a query against product text.

Query embedding (a term -> weight map, not a learned embedding):
    weight(token at position i) = 1 / (i + 1) * boost
    boost = 1.5 if the token appeared in a recent turn's query, else 1.0
    tokens only present in recent queries get weight 0.3
    a token repeated in the query keeps its last position's weight

Product attention score:
    sum(weights of query tokens found in the product) / count(those tokens)
Products with no overlapping token are dropped.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from shopsearch.engines.recommendation.vectorizer import SearchIndex
from shopsearch.services.tokenizer import tokenize

logger = logging.getLogger(__name__)


class AttentionScorer:
    """Weights query tokens by position and recent context, then scores products"""

    CONTEXT_BOOST = 1.5
    CONTEXT_ONLY_WEIGHT = 0.3

    def build_query_embedding(self, query: str, context_queries: Optional[Sequence[str]] = None) -> Dict[str, float]:
        """
        Args:
            query: Current query text
            context_queries: Queries of the most recent conversation turns

        Returns:
            Mapping of token to attention weight
        """
        context_tokens = set()
        for previous in context_queries or []:
            context_tokens.update(tokenize(previous))

        embedding: Dict[str, float] = {}
        # A repeated token ends up with the weight of its last position
        for position, token in enumerate(tokenize(query)):
            boost = self.CONTEXT_BOOST if token in context_tokens else 1.0
            embedding[token] = (1 / (position + 1)) * boost

        for token in sorted(context_tokens):
            if token not in embedding:
                embedding[token] = self.CONTEXT_ONLY_WEIGHT

        return embedding

    @staticmethod
    def score_tokens(embedding: Dict[str, float], product_tokens: Iterable[str]) -> float:
        tokens = set(product_tokens)
        matched = [weight for token, weight in embedding.items() if token in tokens]
        if not matched:
            return 0.0
        return sum(matched) / len(matched)

    def rank(
        self,
        query: str,
        index: SearchIndex,
        context_queries: Optional[Sequence[str]] = None,
    ) -> List[Tuple[str, float]]:
        """
        Score every indexed product and return (product_id, score) pairs with
        score > 0, highest first; equal scores are ordered by product id.
        """
        embedding = self.build_query_embedding(query, context_queries)
        if not embedding:
            return []

        scored = []
        for product_id, entry in index.products.items():
            score = self.score_tokens(embedding, entry.tokens)
            if score > 0:
                scored.append((product_id, score))

        scored.sort(key=lambda item: (-item[1], item[0]))
        logger.debug(f"Attention matched {len(scored)} of {len(index)} products")
        return scored
