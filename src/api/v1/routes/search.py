"""Contact-graph search API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentProfileId
from api.v1.dependencies import get_contact_graph_service
from api.v1.schemas.search import SearchResponse, SearchResultResponse
from core.rate_limit import limiter
from domain.services.contact_graph_service import ContactGraphService

router = APIRouter(prefix="/search", tags=["search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search people",
    responses={
        200: {"description": "Ranked, deduplicated results"},
        503: {"description": "Store unavailable"},
    },
)
@limiter.limit("60/minute")  # type: ignore[untyped-decorator]
async def search_people(
    request: Request,
    profile_id: CurrentProfileId,
    q: str = Query("", max_length=100, description="Search term"),
    service: ContactGraphService = Depends(get_contact_graph_service),
) -> SearchResponse:
    """
    Search the caller's contact graph.

    Results are ordered by connection tier (`direct`, `second_degree`,
    `free_text`, `unregistered`), then display name. Each person appears
    once, under their closest tier. An empty term returns no results.
    """
    results = await service.search(profile_id, q)
    return SearchResponse(
        data=[SearchResultResponse.from_result(r) for r in results],
        meta={"total": len(results)},
    )
