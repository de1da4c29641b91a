import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from brewbook.app.core.config import Settings, get_settings
from brewbook.app.core.errors import LLMError

logger = logging.getLogger(__name__)


def strip_code_fence(text: str) -> str:
    txt = (text or "").strip()
    if txt.startswith("```"):
        # Remove leading fence with optional language tag
        txt = re.sub(r"^```[a-zA-Z0-9_-]*\s*", "", txt, count=1)
        txt = re.sub(r"\s*```$", "", txt, count=1).strip()
    return txt


@dataclass
class ChatCompletion:
    content: Optional[str]
    tokens_used: int
    model: str


class LLMClient:
    """Client for an OpenAI-compatible API: chat completions, embeddings and images."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None):
        self.settings = settings or get_settings()
        self._client = client

    def _headers(self) -> Dict[str, str]:
        if not self.settings.openai_api_key:
            raise LLMError("OPENAI_API_KEY must be set to call the model endpoint")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.openai_api_key}",
        }
        if self.settings.openai_org_id:
            headers["OpenAI-Organization"] = self.settings.openai_org_id
        return headers

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.settings.llm_base_url.rstrip('/')}{path}"
        headers = self._headers()
        timeout = httpx.Timeout(self.settings.llm_timeout_seconds, connect=10.0)
        try:
            if self._client is not None:
                resp = await self._client.post(url, json=payload, headers=headers, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    resp = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise LLMError(f"Request to {path} failed: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            error_info = data["error"]
            error_type = error_info.get("type", "unknown_error")
            error_message = error_info.get("message", "Unknown error")
            logger.error(
                "Model endpoint returned error for %s: type=%s, message=%s",
                path,
                error_type,
                str(error_message)[:500],
            )
            raise LLMError(f"Model endpoint error ({error_type}): {error_message}")
        if resp.status_code >= 400:
            raise LLMError(f"Model endpoint returned status {resp.status_code} for {path}")
        if not isinstance(data, dict):
            raise LLMError(f"Model endpoint returned a non-JSON body for {path}")
        return data

    async def chat_json(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.8,
        max_tokens: int = 2000,
    ) -> ChatCompletion:
        """Chat completion constrained to a JSON object reply."""
        model = self.settings.llm_chat_model
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "response_format": {"type": "json_object"},
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        data = await self._post("/v1/chat/completions", payload)
        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        tokens_used = int((data.get("usage") or {}).get("total_tokens") or 0)
        logger.info("Chat completion via %s used %d tokens", model, tokens_used)
        return ChatCompletion(content=content, tokens_used=tokens_used, model=model)

    async def embed(self, text: str) -> List[float]:
        payload = {
            "model": self.settings.llm_embedding_model,
            "input": text,
            "encoding_format": "float",
        }
        data = await self._post("/v1/embeddings", payload)
        try:
            return [float(v) for v in data["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise LLMError("Embedding response missing vector") from exc

    async def generate_image(self, prompt: str, size: str = "1024x1024", quality: str = "standard") -> str:
        payload = {
            "model": self.settings.llm_image_model,
            "prompt": prompt,
            "size": size,
            "quality": quality,
            "n": 1,
        }
        data = await self._post("/v1/images/generations", payload)
        images = data.get("data") or []
        if not images:
            return ""
        return images[0].get("url") or ""
