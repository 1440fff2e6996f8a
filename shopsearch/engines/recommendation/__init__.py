"""
Search & Recommendation Engine

Handles query understanding, candidate retrieval, ranking and personalization.
"""

from .core import SearchEngine, search_engine
from .schemas import ScoredProduct, SearchResponse
from .search_service import SearchService
from .ranking_service import MultiSignalRanker
from .attention import AttentionScorer
from .vectorizer import IndexUnavailableError, SearchIndex, TfidfVectorizer, VocabularyBuilder
from .similarity import cosine_similarity, rank_by_similarity

__all__ = [
    "SearchEngine",
    "search_engine",
    "ScoredProduct",
    "SearchResponse",
    "SearchService",
    "MultiSignalRanker",
    "AttentionScorer",
    "IndexUnavailableError",
    "SearchIndex",
    "TfidfVectorizer",
    "VocabularyBuilder",
    "cosine_similarity",
    "rank_by_similarity",
]
