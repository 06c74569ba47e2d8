"""AI-assisted content endpoints."""

import structlog
from fastapi import APIRouter, Depends

from postboard.api.dependencies import get_caption_service, require_user
from postboard.models.caption import CaptionRequest, CaptionResponse
from postboard.services.caption_service import CaptionService
from postboard.services.errors import MissingInputError

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/enhance-caption")
async def enhance_caption(
    request: CaptionRequest,
    user_id: str = Depends(require_user),
    captions: CaptionService = Depends(get_caption_service),
) -> CaptionResponse:
    """Rewrite a post caption to be short and catchy."""
    if not request.caption:
        raise MissingInputError("Caption is required")

    enhanced = await captions.enhance(request.caption)
    logger.info("caption_enhanced", user_id=user_id)
    return CaptionResponse(enhanced_caption=enhanced)
