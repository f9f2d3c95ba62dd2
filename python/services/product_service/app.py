"""Product Service — FastAPI application for managing products."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Header, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError as PydanticValidationError

from common.models import Product, ProductBase, ProductPage, ProductStats

from product_service.config import Settings, get_settings, load_settings
from product_service.errors import ValidationError, install_error_handlers
from product_service.store import ProductStore

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("product_service.access")


def get_store(request: Request) -> ProductStore:
    return request.app.state.store


def require_api_key(
    x_api_key: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    if x_api_key != settings.api_key:
        raise ValidationError("Unauthorized: Invalid API Key")


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


async def product_payload(
    request: Request, _auth: None = Depends(require_api_key)
) -> ProductBase:
    """Parse and type-check the JSON body; runs only once the API key passed.

    Bodies not sent as ``application/json`` are treated as empty.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    if content_type != "application/json":
        raise ValidationError("Invalid product data")
    try:
        data = json.loads(await request.body(), parse_constant=_reject_constant)
        return ProductBase.model_validate(data)
    except (ValueError, PydanticValidationError):
        raise ValidationError("Invalid product data") from None


def create_app(settings: Optional[Settings] = None, store: Optional[ProductStore] = None) -> FastAPI:
    app = FastAPI(title="Product Service", version="0.3.0")
    app.state.store = store if store is not None else ProductStore()
    if settings is not None:
        app.dependency_overrides[get_settings] = lambda: settings
    install_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        access_logger.info("[%s] %s %s", timestamp, request.method, target)
        # non-strict routing: "/api/products/" is served as "/api/products"
        path = request.scope["path"]
        if path != "/" and path.endswith("/"):
            request.scope["path"] = path.rstrip("/") or "/"
        return await call_next(request)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Hello World"

    @app.get("/api/products", response_model=ProductPage)
    def list_products(
        category: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        store: ProductStore = Depends(get_store),
    ):
        return store.list(category=category, page=page, limit=limit)

    # /search and /stats must be registered before /{product_id}
    @app.get("/api/products/search", response_model=list[Product])
    def search_products(name: Optional[str] = None, store: ProductStore = Depends(get_store)):
        return store.search(name)

    @app.get("/api/products/stats", response_model=ProductStats)
    def product_stats(store: ProductStore = Depends(get_store)):
        return store.stats()

    @app.get("/api/products/{product_id}", response_model=Product)
    def get_product(product_id: str, store: ProductStore = Depends(get_store)):
        return store.get(product_id)

    @app.post("/api/products", response_model=Product, status_code=201)
    def create_product(
        payload: ProductBase = Depends(product_payload),
        store: ProductStore = Depends(get_store),
    ):
        return store.create(payload)

    @app.put("/api/products/{product_id}", response_model=Product)
    def update_product(
        product_id: str,
        payload: ProductBase = Depends(product_payload),
        store: ProductStore = Depends(get_store),
    ):
        return store.update(product_id, payload)

    @app.delete(
        "/api/products/{product_id}",
        status_code=204,
        response_class=Response,
        dependencies=[Depends(require_api_key)],
    )
    def delete_product(product_id: str, store: ProductStore = Depends(get_store)):
        store.delete(product_id)
        return Response(status_code=204)

    return app


app = create_app()


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Server is running on http://localhost:%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
