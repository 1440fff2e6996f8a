"""
Storefront product search and recommendation engine
"""
from shopsearch.engines.recommendation import IndexUnavailableError, SearchEngine, SearchResponse
from shopsearch.services.session_store import Session, SessionStore

__version__ = "1.0.0"

__all__ = ["IndexUnavailableError", "SearchEngine", "SearchResponse", "Session", "SessionStore"]
