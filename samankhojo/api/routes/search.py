"""Unified search across shops, items and menu items."""

from dataclasses import asdict
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from samankhojo.api.deps import get_optional_user, get_search_service
from samankhojo.components.search import SearchQuery, SearchService
from samankhojo.domain.entities import User

router = APIRouter()


class SearchResultResponse(BaseModel):
    kind: Literal["shop", "item", "menu"]
    id: str
    name: str
    description: str
    shop_id: str
    shop_name: str
    shop_address: str
    shop_phone: str
    relevance: float
    distance_km: float | None
    category: str | None
    price: float | None
    image_url: str | None


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultResponse]
    count: int
    used_fallback: bool


class SuggestionResponse(BaseModel):
    text: str
    kind: Literal["item", "shop"]


@router.get("", response_model=SearchResponse)
def universal_search(
    q: str = Query(..., min_length=1),
    lat: float | None = None,
    lng: float | None = None,
    limit: int | None = Query(None, ge=1, le=100),
    current_user: User | None = Depends(get_optional_user),
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search everything; falls back to plain substring matching when scoring finds nothing."""
    output = service.universal(
        SearchQuery(
            text=q,
            lat=lat,
            lng=lng,
            limit=limit,
            user_id=str(current_user.id) if current_user else None,
        )
    )
    return SearchResponse(
        query=q,
        results=[SearchResultResponse(**asdict(r)) for r in output.results],
        count=len(output.results),
        used_fallback=output.used_fallback,
    )


@router.get("/suggestions", response_model=list[SuggestionResponse])
def search_suggestions(
    q: str = Query(..., min_length=1),
    service: SearchService = Depends(get_search_service),
) -> list[SuggestionResponse]:
    return [SuggestionResponse(text=s.text, kind=s.kind) for s in service.suggestions(q)]


@router.get("/did-you-mean")
def did_you_mean(
    q: str = Query(..., min_length=1),
    service: SearchService = Depends(get_search_service),
) -> dict[str, Any]:
    return {"query": q, "suggestions": service.did_you_mean(q)}


@router.get("/popular")
def popular_searches(
    limit: int = Query(10, ge=1, le=50),
    service: SearchService = Depends(get_search_service),
) -> list[dict[str, Any]]:
    return [{"term": t.term, "count": t.count} for t in service.popular(limit)]
