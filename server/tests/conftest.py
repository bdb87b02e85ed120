"""共享 fixtures — mock 推理网关, 测试配置, 客户端等。"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx
import pytest

from binsight.analyzer import MaterialAnalyzer
from binsight.config import InferenceConfig, Settings, load_settings
from binsight.inference import InferenceClient

FIXTURES_DIR = Path(__file__).parent / "fixtures"

TEST_API_KEY = "test-key-123"


def chat_completion(content: Any) -> dict[str, Any]:
    """构造 OpenAI 风格的 chat/completions 响应体。"""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


# ────────────────────── Mock 推理网关 ──────────────────────


class MockUpstream:
    """模拟推理网关，记录收到的请求。"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: Any = chat_completion('{"materials": [], "summary": "ok"}')
        self.error: type[httpx.RequestError] | None = None

    def reply(self, content: Any) -> None:
        """下一次调用返回 200 + 指定 content。"""
        self.status_code = 200
        self.body = chat_completion(content)

    def respond(self, status_code: int, body: Any) -> None:
        """下一次调用返回任意状态码和响应体（dict 为 JSON，str 为文本）。"""
        self.status_code = status_code
        self.body = body

    def raise_error(self, error: type[httpx.RequestError]) -> None:
        """下一次调用在传输层抛出指定异常。"""
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error("mock transport error", request=request)
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


# ────────────────────── Fixtures ──────────────────────


@pytest.fixture
def test_config() -> Settings:
    """加载测试专用配置。"""
    return load_settings(FIXTURES_DIR / "test_config.toml")


@pytest.fixture
def inference_config(test_config) -> InferenceConfig:
    return test_config.inference


@pytest.fixture
def api_key(monkeypatch, inference_config) -> str:
    """设置推理凭据环境变量。"""
    monkeypatch.setenv(inference_config.api_key_env, TEST_API_KEY)
    return TEST_API_KEY


@pytest.fixture
def no_api_key(monkeypatch, inference_config) -> None:
    monkeypatch.delenv(inference_config.api_key_env, raising=False)


@pytest.fixture
def upstream() -> MockUpstream:
    return MockUpstream()


@pytest.fixture
async def inference_client(inference_config, upstream):
    client = InferenceClient(inference_config, transport=upstream.transport)
    await client.start()
    yield client
    await client.close()


@pytest.fixture
def analyzer(inference_config, inference_client) -> MaterialAnalyzer:
    return MaterialAnalyzer(inference_config, inference_client)


@pytest.fixture
def bottle_result() -> dict[str, Any]:
    """塑料瓶的标准分析结果。"""
    return json.loads((FIXTURES_DIR / "plastic_bottle.json").read_text(encoding="utf-8"))
