"""配置管理 — Pydantic Settings 从 TOML 加载。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings

_DEFAULT_TOML = Path(__file__).resolve().parent.parent / "config" / "default.toml"


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    cors_origins: list[str] = ["*"]


class InferenceConfig(BaseModel):
    base_url: str = "https://ai.gateway.lovable.dev/v1"
    model: str = "google/gemini-2.5-flash"
    timeout: float = 60.0
    # 凭据只从该环境变量读取，不落配置文件
    api_key_env: str = "LOVABLE_API_KEY"

    def api_key(self) -> str | None:
        """调用时读取凭据，未设置或为空返回 None。"""
        return os.environ.get(self.api_key_env) or None


class Settings(BaseSettings):
    server: ServerConfig = ServerConfig()
    inference: InferenceConfig = InferenceConfig()

    model_config = {"env_prefix": "BINSIGHT_", "env_nested_delimiter": "__"}

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # TOML 内容经 init 传入，优先级低于环境变量
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def load_settings(toml_path: Path = _DEFAULT_TOML) -> Settings:
    """从 TOML 文件加载配置，环境变量可覆盖。"""
    import sys

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib

    if toml_path.exists():
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
        return Settings(**data)
    return Settings()
