"""推理服务客户端 — OpenAI 兼容 chat/completions 多模态调用。"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from binsight.errors import EmptyResponse, InferenceFailure, QuotaExceeded, RateLimited
from binsight.prompts import SYSTEM_PROMPT, USER_INSTRUCTION

if TYPE_CHECKING:
    from binsight.config import InferenceConfig

logger = logging.getLogger(__name__)

_STATUS_ERRORS = {
    429: RateLimited,
    402: QuotaExceeded,
}


class InferenceClient:
    """单次同步式调用，不重试；连接由 httpx.AsyncClient 复用。"""

    def __init__(self, config: InferenceConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.config.base_url,
            timeout=httpx.Timeout(self.config.timeout),
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_messages(self, image_url: str) -> list[dict[str, Any]]:
        """组装 messages（system schema 说明 + user 文本与图片）。"""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": USER_INSTRUCTION},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            },
        ]

    async def complete(self, messages: list[dict[str, Any]], api_key: str) -> str:
        """调用 /chat/completions，返回首个 choice 的文本内容。"""
        if not self._client:
            raise RuntimeError("Inference client not started")

        payload: dict[str, Any] = {"model": self.config.model, "messages": messages}
        headers = {"Authorization": f"Bearer {api_key}"}

        try:
            resp = await self._client.post("/chat/completions", json=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error("Inference request timed out after %.1fs: %s", self.config.timeout, e)
            raise InferenceFailure() from e
        except httpx.HTTPError as e:
            logger.error("Inference request failed: %s", e)
            raise InferenceFailure() from e

        if not resp.is_success:
            error_cls = _STATUS_ERRORS.get(resp.status_code)
            if error_cls is not None:
                logger.warning("Inference gateway returned %d", resp.status_code)
                raise error_cls()
            logger.error("AI gateway error: %d %s", resp.status_code, resp.text)
            raise InferenceFailure()

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("Inference gateway returned non-JSON body: %s", e)
            raise InferenceFailure() from e

        content = _first_choice_content(data)
        if not content:
            raise EmptyResponse()
        return content


def _first_choice_content(data: Any) -> str | None:
    """取 choices[0].message.content，任一层缺失返回 None。"""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        return None
    return content
