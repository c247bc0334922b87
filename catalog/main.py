# catalog/main.py
from contextlib import asynccontextmanager
from typing import Any, List, Optional

from fastapi import Body, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .core import CatalogError, StoreUnavailable, describe_validation_error
from .database import build_store
from .logger import get_logger
from .models import Product
from .sdk import (
    create_product_logic, ensure_seed_data, get_product_logic,
    health_logic, list_products_logic
)

log = get_logger("api")


def create_app(store=None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if store is None:
        store = build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.seed_sample_data:
            try:
                ensure_seed_data(app.state.store)
            except StoreUnavailable:
                log.error("could not seed sample data, store unavailable")
        yield

    app = FastAPI(title="catalog-api", lifespan=lifespan)
    app.state.store = store
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------
    # Error translation
    # ---------------------------
    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": describe_validation_error(exc.errors())})

    # ---------------------------
    # Service endpoints
    # ---------------------------
    @app.get("/")
    def read_root():
        return {"message": "catalog API running"}

    @app.get("/health")
    def health(request: Request):
        return health_logic(request.app.state.store)

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.get("/api/products", response_model=List[Product])
    def list_products(request: Request, q: Optional[str] = Query(None)):
        return list_products_logic(request.app.state.store, q)

    @app.get("/api/products/{product_id}", response_model=Product)
    def get_product(request: Request, product_id: str):
        return get_product_logic(request.app.state.store, product_id)

    @app.post("/api/products", response_model=Product, status_code=201)
    def create_product(request: Request, payload: Any = Body(None)):
        return create_product_logic(request.app.state.store, payload)

    return app


app = create_app()


def run():
    import uvicorn
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
