"""模型回复解析 — 提取 JSON 并规整为 AnalysisResult，失败时降级。"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass

from pydantic import ValidationError

from binsight.schemas import AnalysisResult, MaterialRecord, MaterialType, RecyclableStatus

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)
_FENCED_PLAIN = re.compile(r"```[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)

FALLBACK_NAME = "Analysis Result"
FALLBACK_SUMMARY = "Unable to parse structured response. See details above."


@dataclass(frozen=True)
class ParseOutcome:
    result: AnalysisResult
    degraded: bool = False
    error: str | None = None  # 仅用于诊断，不返回给调用方


def extract_json_text(content: str) -> str:
    """先找 ```json 代码块，再找无标签代码块，都没有则返回原文。"""
    for pattern in (_FENCED_JSON, _FENCED_PLAIN):
        match = pattern.search(content)
        if match:
            return match.group(1)
    return content


def degraded_result(content: str) -> AnalysisResult:
    """无法结构化时的兜底结果，原始回复完整保留在 instructions 中。"""
    return AnalysisResult(
        materials=[
            MaterialRecord(
                name=FALLBACK_NAME,
                type=MaterialType.OTHER.value,
                recyclable=RecyclableStatus.CONDITIONAL.value,
                instructions=content,
                preparation="See instructions",
                bin_type="See instructions",
                notes="Please review the full analysis above",
            )
        ],
        summary=FALLBACK_SUMMARY,
    )


def parse_analysis(content: str) -> ParseOutcome:
    """把模型回复解析为 AnalysisResult。

    JSON 解析失败或结构不符都不会抛异常，而是返回 degraded=True 的兜底结果。
    """
    try:
        data = json.loads(extract_json_text(content))
        return ParseOutcome(result=AnalysisResult.model_validate(data))
    except (json.JSONDecodeError, RecursionError) as e:
        error = f"invalid JSON: {e}"
    except ValidationError as e:
        error = f"schema mismatch: {e.error_count()} error(s)"

    logger.warning("Failed to parse model response (%s), using fallback result", error)
    return ParseOutcome(result=degraded_result(content), degraded=True, error=error)
