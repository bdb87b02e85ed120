"""FastAPI 应用工厂 + lifespan。"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, File, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from binsight.analyzer import MaterialAnalyzer
from binsight.config import Settings, load_settings
from binsight.errors import AnalysisError, MissingInput
from binsight.images import upload_to_data_uri
from binsight.inference import InferenceClient
from binsight.schemas import AnalysisResult, AnalyzeRequest, ErrorResponse

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/v1/identify-material"
UPLOAD_PATH = f"{ANALYZE_PATH}/upload"

_CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动/关闭生命周期管理。"""
    settings: Settings = app.state.settings

    # 1. 日志
    logging.basicConfig(
        level=getattr(logging, settings.server.log_level),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    # 2. 推理客户端
    client = InferenceClient(settings.inference, transport=app.state.transport)
    await client.start()

    # 3. 中介
    app.state.client = client
    app.state.analyzer = MaterialAnalyzer(settings.inference, client)

    if settings.inference.api_key() is None:
        logger.warning("%s is not set, analysis requests will fail", settings.inference.api_key_env)

    yield

    await client.close()


def _error_response(error: AnalysisError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_payload().model_dump())


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """创建 FastAPI 应用。transport 仅供测试替换上游。"""
    if settings is None:
        settings = load_settings()

    app = FastAPI(title="binsight", lifespan=lifespan)
    app.state.settings = settings
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_CORS_HEADERS,
    )

    @app.exception_handler(AnalysisError)
    async def analysis_error_handler(request: Request, exc: AnalysisError):
        logger.error("Error in identify-material: %s (%s)", exc.message, exc.code)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request without usable image: %s", exc.errors())
        return _error_response(MissingInput())

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unexpected error in identify-material")
        return _error_response(AnalysisError())

    error_responses = {
        status: {"model": ErrorResponse} for status in (400, 402, 415, 429, 500, 502)
    }

    @app.post(ANALYZE_PATH, response_model=AnalysisResult, responses=error_responses)
    async def identify_material(body: AnalyzeRequest):
        analyzer: MaterialAnalyzer = app.state.analyzer
        return await analyzer.analyze(body.image_data)

    @app.post(UPLOAD_PATH, response_model=AnalysisResult, responses=error_responses)
    async def identify_material_upload(file: UploadFile = File(...)):
        data = await file.read()
        image_url = upload_to_data_uri(data, file.content_type)
        analyzer: MaterialAnalyzer = app.state.analyzer
        return await analyzer.analyze(image_url)

    # 非 CORS 预检的 OPTIONS 也直接返回空响应
    @app.options(ANALYZE_PATH)
    @app.options(UPLOAD_PATH)
    async def preflight():
        return Response(status_code=200)

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "model": settings.inference.model,
            "configured": settings.inference.api_key() is not None,
        }

    return app
