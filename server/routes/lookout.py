"""Lookout endpoint: run the full pipeline for one chat message."""

from fastapi import APIRouter, Depends, Request

from orchestrator.command_detector import detect_lookout_command
from orchestrator.pipeline import LookoutPipeline
from server.dependencies import get_pipeline
from server.schemas.requests import LookoutRequest
from server.schemas.responses import LookoutResponseDTO
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["Lookout"])


@router.post("/lookout", response_model=LookoutResponseDTO, response_model_exclude_none=True)
async def lookout(
    payload: LookoutRequest,
    request: Request,
    pipeline: LookoutPipeline = Depends(get_pipeline),
):
    """Detect an @lookout command in ``text`` and run it to a final state."""
    request_id = getattr(request.state, "request_id", "unknown")
    command = detect_lookout_command(payload.text, payload.highlighted_snippets)

    if not command.is_command:
        return LookoutResponseDTO.not_a_command()

    state = await pipeline.run(command)
    logger.info(
        "Lookout request completed",
        extra={
            "extra_fields": {
                "request_id": request_id,
                "stage": state.stage.value,
                "result_count": len(state.results),
                "used_fallback_query": bool(
                    state.generated_query and state.generated_query.used_fallback
                ),
            }
        },
    )
    return LookoutResponseDTO.from_state(state)
