import logging
from fastapi import APIRouter, HTTPException, Depends, status
from lynix.schemas.chat import AIChatRequest, AIChatResponse
from lynix.services.ai.llm_service import generate_reply
from lynix.services.exceptions import (
    AIServiceError,
    AIServiceUnavailableError,
    ValidationFailedError,
)
from lynix.utils.dependencies import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["LynxAI"])


@router.post("/chat", response_model=AIChatResponse)
async def chat_with_assistant(
    request: AIChatRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Forward a prompt and prior turns to the AI assistant"""
    history = [turn.model_dump() for turn in request.history] if request.history else None

    try:
        text = await generate_reply(request.prompt, history)
    except AIServiceUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    except ValidationFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except AIServiceError as e:
        logger.error(f"AI chat failed for {user_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred while contacting the AI assistant."
        )

    return AIChatResponse(text=text)
