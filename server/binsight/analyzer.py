"""材料分析中介 — 图片 → 推理服务 → 规整后的 AnalysisResult。"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from binsight.errors import ConfigurationError
from binsight.images import normalize_image
from binsight.parsing import parse_analysis

if TYPE_CHECKING:
    from binsight.config import InferenceConfig
    from binsight.inference import InferenceClient
    from binsight.schemas import AnalysisResult

logger = logging.getLogger(__name__)


class MaterialAnalyzer:
    """无状态，可并发调用。"""

    def __init__(self, config: InferenceConfig, client: InferenceClient) -> None:
        self.config = config
        self._client = client

    async def analyze(self, image: str | bytes | None) -> AnalysisResult:
        """分析一张图片。

        前置条件（图片非空、凭据存在）不满足时在发起网络请求前就抛错；
        传输/状态错误以 AnalysisError 子类抛出；模型内容无法解析时返回
        降级结果而不是报错。
        """
        image_url = normalize_image(image)

        api_key = self.config.api_key()
        if not api_key:
            logger.error("%s is not configured", self.config.api_key_env)
            raise ConfigurationError()

        logger.info("Analyzing image for recyclable materials...")
        messages = self._client.build_messages(image_url)
        content = await self._client.complete(messages, api_key)

        outcome = parse_analysis(content)
        if outcome.degraded:
            logger.info("Returning degraded analysis result")
        else:
            logger.info("Successfully analyzed image: %d material(s)", len(outcome.result.materials))
        return outcome.result
