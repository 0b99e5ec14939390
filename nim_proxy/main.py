"""Main application entry point"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nim_proxy import __version__
from nim_proxy.api.router import api_router, health_router, metrics_router
from nim_proxy.core.config import get_config
from nim_proxy.core.error_types import NOT_FOUND_MESSAGE
from nim_proxy.core.exceptions import ProxyError
from nim_proxy.core.middleware import MetricsMiddleware
from nim_proxy.core.metrics import APP_INFO
from nim_proxy.core.logging import setup_logging, get_logger

logger = get_logger()


async def proxy_error_handler(request: Request, exc: ProxyError) -> JSONResponse:
    """Render proxy errors without internal detail"""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown paths and methods share one 404 body"""
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={'error': {'message': NOT_FOUND_MESSAGE}})
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': {'message': str(exc.detail)}},
        headers=getattr(exc, 'headers', None),
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="NIM Proxy",
        description="OpenAI-compatible proxy for NVIDIA NIM chat completions",
        version=__version__
    )

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ProxyError, proxy_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(api_router)
    app.include_router(health_router)
    app.include_router(metrics_router)

    @app.on_event("startup")
    async def startup_event():
        """Log the effective configuration on startup"""
        config = get_config()
        setup_logging(log_level=config.logging.level, log_file=config.logging.file)

        APP_INFO.info({
            'version': __version__,
            'title': 'NIM Proxy'
        })

        logger.info(f"Starting NIM Proxy -> {config.upstream.api_base}")
        logger.info(f"Model mappings: {len(config.model_mapping)} (fallback: {config.fallback_model})")
        for name, target in config.model_mapping.items():
            logger.info(f"  - {name} -> {target}")
        logger.info(
            f"Features: reasoning={config.features.show_reasoning} "
            f"thinking={config.features.enable_thinking_mode}"
        )
        if not config.upstream.api_key:
            logger.warning("NIM_API_KEY is not set; upstream requests will be unauthenticated")

    return app


app = create_app()
