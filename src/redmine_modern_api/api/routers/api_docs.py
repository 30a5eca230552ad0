"""
redmine_modern_api.api.routers.api_docs

OpenAPI document and Swagger UI for the v1 API.

Responsibilities:
- Serve the generated OpenAPI 3 document with v1 metadata and server list.
- Serve a Swagger UI page bound to that document.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse

from redmine_modern_api.api.deps import settings_dep
from redmine_modern_api.settings import Settings

SWAGGER_JSON_PATH = "/api-docs/v1/swagger.json"
API_TITLE = "Redmine Modern API Plugin"
API_PREFIX = "/api/v1"

router = APIRouter(include_in_schema=False)


@router.get(SWAGGER_JSON_PATH)
async def swagger(request: Request, settings: Settings = Depends(settings_dep)) -> dict[str, Any]:
    # `app.openapi()` is cached on the app; build a new document instead of mutating it.
    schema = request.app.openapi()
    return {
        **schema,
        "info": {
            "title": API_TITLE,
            "version": "v1",
            "description": "API documentation for Redmine Modern API Plugin",
        },
        "servers": [
            {"url": settings.swagger_local_url, "description": "Local Development"},
            {"url": str(request.base_url).rstrip("/"), "description": "Current Server"},
        ],
        "paths": {
            path: item
            for path, item in schema.get("paths", {}).items()
            if path.startswith(API_PREFIX)
        },
    }


@router.get("/api-docs", response_class=HTMLResponse)
async def swagger_ui() -> HTMLResponse:
    return get_swagger_ui_html(openapi_url=SWAGGER_JSON_PATH, title=f"{API_TITLE} - Swagger UI")
