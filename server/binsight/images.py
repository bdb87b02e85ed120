"""图片载荷规整 — data URI / URL / base64 / 原始字节统一为模型可用的 URL。"""

from __future__ import annotations

import base64

from binsight.errors import MissingInput, UnsupportedImage

_DEFAULT_MIME = "image/jpeg"

# 文件头 → MIME
_MAGIC: list[tuple[bytes, str]] = [
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
]


def sniff_mime(data: bytes) -> str:
    for magic, mime in _MAGIC:
        if data.startswith(magic):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return _DEFAULT_MIME


def to_data_uri(data: bytes, mime: str | None = None) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime or sniff_mime(data)};base64,{encoded}"


def normalize_image(payload: str | bytes | None) -> str:
    """返回可放入 image_url.url 的字符串。空载荷抛 MissingInput。

    data URI 和 http(s) URL 原样透传，裸 base64 补上 data: 前缀，
    字节按文件头推断 MIME。
    """
    if payload is None:
        raise MissingInput()

    if isinstance(payload, (bytes, bytearray)):
        if not payload:
            raise MissingInput()
        return to_data_uri(bytes(payload))

    text = payload.strip()
    if not text:
        raise MissingInput()
    if text.startswith(("data:", "http://", "https://")):
        return text
    return f"data:{_DEFAULT_MIME};base64,{text}"


def upload_to_data_uri(data: bytes, content_type: str | None) -> str:
    """上传文件转 data URI，非 image/* 类型拒绝。"""
    if not content_type or not content_type.startswith("image/"):
        raise UnsupportedImage()
    if not data:
        raise MissingInput()
    return to_data_uri(data, content_type)
