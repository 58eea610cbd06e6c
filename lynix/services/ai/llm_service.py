"""
LLM Service - Proxy chat turns to the Google Gemini API
Supports prior turns from the LynxAI chat page
"""
from typing import Dict, List, Optional
import httpx
import logging
from lynix.config import settings
from lynix.services.exceptions import (
    AIServiceError,
    AIServiceUnavailableError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

ASSISTANT_INSTRUCTION = "You are Mason, a helpful assistant for LynxAI."
FIRST_TURN_INSTRUCTION = ASSISTANT_INSTRUCTION + " Introduce yourself in this first message."


def _build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout)


def build_contents(prompt: str, history: Optional[List[Dict]] = None) -> List[Dict]:
    """
    Convert chat history into Gemini `contents`.

    History entries look like {"sender": "user" | "gemini", "text": "..."};
    the Gemini side of the conversation is sent with role "model".
    """
    contents = []
    for msg in history or []:
        text = msg.get("text")
        if not text:
            continue
        contents.append({
            "role": "user" if msg.get("sender") == "user" else "model",
            "parts": [{"text": text}]
        })

    contents.append({
        "role": "user",
        "parts": [{"text": prompt}]
    })
    return contents


def system_instruction_for(history: Optional[List[Dict]]) -> str:
    return ASSISTANT_INSTRUCTION if history else FIRST_TURN_INSTRUCTION


async def generate_reply(
    prompt: str,
    history: Optional[List[Dict]] = None,
    timeout: Optional[float] = None
) -> str:
    """
    Send a prompt (plus prior turns) to Gemini and return the reply text.

    Raises:
        AIServiceUnavailableError: no API key configured
        ValidationFailedError: empty prompt
        AIServiceError: the backend failed or answered in an unexpected shape
    """
    if not settings.GEMINI_API_KEY:
        logger.error("❌ Gemini API key not configured")
        raise AIServiceUnavailableError("Service Unavailable: AI service is not configured.")

    if not prompt or not prompt.strip():
        raise ValidationFailedError('A "prompt" is required.')

    timeout = timeout or settings.GEMINI_TIMEOUT
    model = settings.GEMINI_MODEL
    url = f"{GEMINI_BASE_URL}/{model}:generateContent"

    payload = {
        "contents": build_contents(prompt, history),
        "systemInstruction": {
            "parts": [{"text": system_instruction_for(history)}]
        },
    }

    try:
        async with _build_client(timeout) as client:
            logger.debug(f"🤖 Calling Gemini API - Model: {model}, Turns: {len(payload['contents'])}")

            response = await client.post(
                url,
                json=payload,
                headers={"x-goog-api-key": settings.GEMINI_API_KEY},
            )

            if response.status_code != 200:
                logger.error(f"❌ Gemini API error ({response.status_code}): {response.text}")
                raise AIServiceError(f"Gemini API returned {response.status_code}")

            try:
                result = response.json()
            except ValueError:
                logger.error(f"❌ Gemini API returned a non-JSON body: {response.text[:200]}")
                raise AIServiceError("Gemini API returned a non-JSON body")
    except httpx.TimeoutException:
        logger.error(f"⏱️ Gemini API timeout after {timeout}s")
        raise AIServiceError(f"AI request timed out after {timeout} seconds")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error calling Gemini API: {str(e)}", exc_info=True)
        raise AIServiceError(f"Failed to reach AI backend: {str(e)}")

    candidates = result.get("candidates") if isinstance(result, dict) else None
    if candidates and isinstance(candidates, list) and isinstance(candidates[0], dict):
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        text = "".join(
            part.get("text") or "" for part in (parts or []) if isinstance(part, dict)
        ).strip()
        if text:
            logger.debug(f"✅ LLM response received ({len(text)} chars)")
            return text

    logger.warning(f"⚠️ Unexpected Gemini response structure: {result}")
    raise AIServiceError("Unexpected response format from Gemini API")
