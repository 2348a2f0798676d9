"""HTTP boundary for the generation endpoints.

Each endpoint parses its JSON body into the matching inputs model, runs the
pipeline, and returns the structured output. Provider failures never surface
here: the pipeline always answers, falling back to offline content.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from .config import ProviderCredentials, load_settings
from .errors import UpstreamInputMissing
from .llm.router import LLMRouter
from .pipeline import generate_business_image, generate_leap_of_faith, generate_mom_test
from .schemas import ImageInputs, LeapOfFaithInputs, MomTestInputs

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

ENDPOINTS = ("generate-leap-of-faith", "generate-mom-test", "generate-business-image")


def _error(status_code: int, error: str, details: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "details": details},
        headers=CORS_HEADERS,
    )


def get_router(request: Request) -> LLMRouter:
    return request.app.state.router


def _respond(endpoint: str, run: Callable[[], Dict[str, Any]]) -> JSONResponse:
    try:
        output = run()
    except UpstreamInputMissing as exc:
        return _error(400, str(exc), {"endpoint": endpoint})
    except Exception as exc:
        logger.exception("Error in %s", endpoint)
        return _error(500, f"Failed to run {endpoint}", str(exc))
    return JSONResponse(content=output, headers=CORS_HEADERS)


def create_app(
    config: Dict[str, Any] | None = None,
    router: LLMRouter | None = None,
    credentials: ProviderCredentials | None = None,
) -> FastAPI:
    config = config if config is not None else load_settings()
    credentials = credentials or ProviderCredentials.from_env()
    router = router or LLMRouter(config, credentials=credentials)

    app = FastAPI(title="Bob the Business Builder generation API", version="0.1.0")
    app.state.config = config
    app.state.router = router
    app.state.credentials = credentials

    @app.middleware("http")
    async def _cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        if any(err.get("type") == "json_invalid" for err in errors):
            return _error(500, "Request body is not valid JSON", errors)
        return _error(400, "Invalid request body", errors)

    async def _preflight() -> Response:
        return Response(content="ok", headers=CORS_HEADERS)

    for endpoint in ENDPOINTS:
        app.add_api_route(f"/{endpoint}", _preflight, methods=["OPTIONS"], include_in_schema=False)

    @app.get("/health", tags=["system"])
    def health(request: Request) -> dict:
        creds: ProviderCredentials = request.app.state.credentials
        return {"status": "ok", "providers": creds.configured()}

    @app.post("/generate-leap-of-faith")
    def leap_of_faith(inputs: LeapOfFaithInputs, llm: LLMRouter = Depends(get_router)) -> JSONResponse:
        logger.info("Generating leap of faith for: %s", inputs.circle_type)
        return _respond("generate-leap-of-faith", lambda: generate_leap_of_faith(llm, inputs))

    @app.post("/generate-mom-test")
    def mom_test(inputs: MomTestInputs, llm: LLMRouter = Depends(get_router)) -> JSONResponse:
        logger.info("Generating Mom Test questions for category: %s", inputs.assumption_category)
        return _respond("generate-mom-test", lambda: generate_mom_test(llm, inputs))

    @app.post("/generate-business-image")
    def business_image(inputs: ImageInputs, llm: LLMRouter = Depends(get_router)) -> JSONResponse:
        return _respond("generate-business-image", lambda: generate_business_image(llm, inputs))

    return app
