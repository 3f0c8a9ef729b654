"""HTML pages for the interactive API documentation."""

import html

from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse

from notelink.server.core.config.models import DocsConfigModel

SCALAR_CDN_URL = "https://cdn.jsdelivr.net/npm/@scalar/api-reference"

_SCALAR_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title} - API Reference</title>
</head>
<body>
    <script id="api-reference" data-url="{openapi_url}"></script>
    <script src="{cdn_url}"></script>
</body>
</html>
"""


def scalar_html(config: DocsConfigModel) -> HTMLResponse:
    content = _SCALAR_TEMPLATE.format(
        title=html.escape(config.title),
        openapi_url=html.escape(config.openapi_path, quote=True),
        cdn_url=SCALAR_CDN_URL,
    )
    return HTMLResponse(content)


def swagger_html(config: DocsConfigModel) -> HTMLResponse:
    return get_swagger_ui_html(
        openapi_url=config.openapi_path,
        title=f"{html.escape(config.title)} - Swagger UI",
    )


def docs_page(config: DocsConfigModel) -> HTMLResponse:
    """Render the docs page selected by ``config.docs_ui``."""
    if config.docs_ui == "swagger":
        return swagger_html(config)
    return scalar_html(config)
