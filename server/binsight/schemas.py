"""分析请求/结果数据模型 — Pydantic 模型。"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RecyclableStatus(str, Enum):
    YES = "yes"
    NO = "no"
    CONDITIONAL = "conditional"


class MaterialType(str, Enum):
    PLASTIC = "plastic"
    PAPER = "paper"
    METAL = "metal"
    GLASS = "glass"
    ORGANIC = "organic"
    OTHER = "other"


_VALID_STATUSES = {s.value for s in RecyclableStatus}
_VALID_TYPES = {t.value for t in MaterialType}


def classify_recyclable(value: str) -> RecyclableStatus:
    """大小写不敏感地归类可回收状态，未知值视为 conditional。"""
    key = value.strip().lower()
    if key in _VALID_STATUSES:
        return RecyclableStatus(key)
    return RecyclableStatus.CONDITIONAL


def classify_material_type(value: str) -> MaterialType:
    """大小写不敏感地归类材料类别，未知值视为 other。"""
    key = value.strip().lower()
    if key in _VALID_TYPES:
        return MaterialType(key)
    return MaterialType.OTHER


# ────────────────────── 结果 ──────────────────────

class MaterialRecord(BaseModel):
    """单个识别出的物品。type / recyclable 原样保留模型输出。"""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    type: str
    recyclable: str
    instructions: str
    preparation: str = ""
    bin_type: str = Field(default="", alias="binType")
    notes: str = ""

    @field_validator("preparation", "bin_type", "notes", mode="before")
    @classmethod
    def _none_to_empty(cls, v):
        return "" if v is None else v

    @property
    def status(self) -> RecyclableStatus:
        return classify_recyclable(self.recyclable)

    @property
    def category(self) -> MaterialType:
        return classify_material_type(self.type)


class AnalysisResult(BaseModel):
    materials: list[MaterialRecord] = Field(default_factory=list)
    summary: str

    def to_wire(self) -> dict:
        """按前端约定的字段名 (binType) 输出。"""
        return self.model_dump(by_alias=True)


# ────────────────────── HTTP ──────────────────────

class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_data: str | None = Field(default=None, alias="imageData")


class ErrorResponse(BaseModel):
    error: str
    code: str
    details: str = ""
