"""
Gemini generateContent transport shared by the agents
"""
import logging
import time
from typing import Any, Dict, Optional

import aiohttp

from productagent.services.errors import AgentEmptyResult, AgentRequestFailed

logger = logging.getLogger(__name__)


def build_url(base_url: str, model: str, api_key: str) -> str:
    """generateContent URL for a model, credential in the query string"""
    return f"{base_url.rstrip('/')}/models/{model}:generateContent?key={api_key}"


def build_inline_part(encoded_image: str, mime_type: str) -> Dict[str, Any]:
    return {"inlineData": {"mimeType": mime_type, "data": encoded_image}}


async def post_generate_content(
    url: str,
    payload: Dict[str, Any],
    agent_name: str,
    timeout: float,
    failure_action: str = "failed to respond"
) -> Dict[str, Any]:
    """
    POST a generateContent request.

    Args:
        url: Full endpoint URL (see build_url)
        payload: JSON request body
        agent_name: Stage name used in errors and logs
        timeout: Total request timeout in seconds
        failure_action: Wording for the non-success error message

    Returns:
        Parsed JSON response

    Raises:
        AgentRequestFailed: non-2xx response
    """
    start_time = time.time()

    async with aiohttp.ClientSession() as session:
        async with session.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            if response.status < 200 or response.status >= 300:
                error_text = await response.text()
                logger.error(f"{agent_name} API error: {response.status} - {error_text[:500]}")
                raise AgentRequestFailed(agent_name, response.status, error_text, action=failure_action)

            # content_type=None: some proxies answer with text/plain
            result = await response.json(content_type=None)

    logger.info(f"{agent_name} API request successful - Time: {time.time() - start_time:.2f}s")
    return result


def _first_candidate_parts(response: Any) -> Optional[list]:
    if not isinstance(response, dict):
        return None

    candidates = response.get('candidates')
    if not isinstance(candidates, list) or not candidates:
        return None

    content = candidates[0].get('content') if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        return None

    parts = content.get('parts')
    return parts if isinstance(parts, list) else None


def extract_first_text(response: Any, agent_name: str) -> str:
    """
    Read candidates[0].content.parts[0].text, stripped.

    Raises:
        AgentEmptyResult: path missing or text blank
    """
    parts = _first_candidate_parts(response)
    text = None
    if parts and isinstance(parts[0], dict):
        text = parts[0].get('text')

    if not isinstance(text, str) or not text.strip():
        logger.error(f"{agent_name}: no text in response. Response: {str(response)[:200]}")
        raise AgentEmptyResult(agent_name, f"{agent_name} Agent returned empty result")

    return text.strip()


def extract_inline_image(response: Any, agent_name: str) -> str:
    """
    Return base64 data of the first inline-data part of candidates[0].

    Raises:
        AgentEmptyResult: no part carries inline data
    """
    for part in _first_candidate_parts(response) or []:
        if not isinstance(part, dict):
            continue
        # REST answers use camelCase, some SDK dumps use snake_case
        inline = part.get('inlineData') or part.get('inline_data')
        if isinstance(inline, dict) and inline.get('data'):
            return inline['data']

    logger.error(f"{agent_name}: no inline image in response. Response: {str(response)[:200]}")
    raise AgentEmptyResult(agent_name, f"{agent_name} Agent could not generate image")
