"""Search endpoint: classified web results for a query."""

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from server.dependencies import get_search_engine
from server.schemas.requests import SearchRequest
from server.schemas.responses import SearchResponseDTO
from server.utils import METHOD_NOT_ALLOWED_MESSAGE, first_validation_message, search_error_response
from tools.web import ResultClassificationEngine
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Search"])


@router.post(
    "/search",
    response_model=SearchResponseDTO,
    response_model_exclude_none=True,
    responses={400: {"model": SearchResponseDTO}, 405: {"model": SearchResponseDTO}},
)
async def search(request: Request, engine: ResultClassificationEngine = Depends(get_search_engine)):
    """
    Search and classify results.

    The body is validated by hand (not as a FastAPI body parameter) so that
    malformed requests get the 400 search envelope instead of a 422.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    try:
        body = await request.json()
    except ValueError:
        body = None

    try:
        payload = SearchRequest.model_validate(body)
    except ValidationError as e:
        message = first_validation_message(e)
        logger.info(
            "Search request rejected",
            extra={"extra_fields": {"request_id": request_id, "reason": message}},
        )
        return search_error_response(message)

    outcome = await engine.search(payload.query, payload.prioritize_videos)
    return SearchResponseDTO.from_outcome(outcome)


@router.api_route(
    "/search", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False
)
async def search_method_not_allowed():
    return search_error_response(METHOD_NOT_ALLOWED_MESSAGE, status.HTTP_405_METHOD_NOT_ALLOWED)
