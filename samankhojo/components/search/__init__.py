"""
Search component - Universal search, suggestions and popular terms.
"""

from ._impl import SearchService
from ._scoring import FIELD_WEIGHTS, levenshtein, match_score, relevance, substring_filter
from .models import PopularTerm, SearchOutput, SearchQuery, SearchResult, Suggestion
from .ports import SearchCatalogPort, SearchLogRepoPort

__all__ = [
    "SearchService",
    "SearchQuery",
    "SearchResult",
    "SearchOutput",
    "Suggestion",
    "PopularTerm",
    "SearchCatalogPort",
    "SearchLogRepoPort",
    "FIELD_WEIGHTS",
    "levenshtein",
    "match_score",
    "relevance",
    "substring_filter",
]
