"""
Main API module for Alias Platform.

Responsibilities:
    - Expose REST endpoints to save, resolve and delete aliases
    - Expose register/login endpoints that hand out session tokens
    - Map domain errors to HTTP status codes in one place

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Storage is chosen by ALIAS_STORAGE_BACKEND (SQLite by default) unless injected.
    - LinkManager and AccountManager hold the business rules; routes only
      decode the request, call one manager method and encode the result.
    - Endpoints are plain `def` functions, so FastAPI runs each request on a
      worker thread; the storage backends are safe to share across threads.

Run:
    uvicorn main:app              (module-level app, default config)
    python main.py                (same, bound to ALIAS_HOST:ALIAS_PORT)
"""

import contextlib
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from alias_platform.config import settings
from alias_platform.errors import AliasPlatformError, InvalidInputError, StoreError
from alias_platform.logger import get_logger, setup_logging
from alias_platform.manager.account_manager import AccountManager
from alias_platform.manager.link_manager import LinkManager
from alias_platform.manager.strategies import BaseStrategy
from alias_platform.storage.base import BaseStorage
from alias_platform.storage.storage_factory import get_storage


class SaveRequest(BaseModel):
    """Request payload for saving a URL under an alias."""
    url: str
    alias: Optional[str] = None


class Credentials(BaseModel):
    """Request payload for register and login."""
    username: str
    password: str


def _ok(**payload: Any) -> Dict[str, Any]:
    return {"status": "OK", **payload}


def create_app(
    storage: Optional[BaseStorage] = None,
    alias_strategy: Optional[BaseStrategy] = None,
    token_generator: Optional[BaseStrategy] = None,
) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage: Backend to use; defaults to get_storage() (env driven).
        alias_strategy: Alias generator override (tests).
        token_generator: Session token generator override (tests).

    Returns:
        FastAPI: A fully configured application instance.

    Raises:
        StoreError: If the storage backend cannot be initialised. Startup
            must not continue without a schema.
    """
    setup_logging(settings.ENV, settings.LOG_LEVEL or None)
    log = get_logger("alias_platform.api")

    if storage is None:
        try:
            storage = get_storage()
        except StoreError:
            log.exception("failed to init storage")
            raise

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI):
        yield
        storage.close()

    app = FastAPI(
        title="Alias Platform",
        description="Alias-keyed URL shortener with accounts and sessions",
        docs_url="/docs",
        lifespan=lifespan,
    )

    links = LinkManager(storage, alias_strategy=alias_strategy)
    accounts = AccountManager(storage, storage, token_generator=token_generator)
    app.state.storage = storage

    log.info("starting alias platform (env=%s)", settings.ENV)

    # ----------------------------------------------------------------
    # Error mapping
    # ----------------------------------------------------------------
    @app.exception_handler(AliasPlatformError)
    async def handle_domain_error(request: Request, exc: AliasPlatformError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        # Only validation errors carry a client-safe detail
        message = exc.detail if isinstance(exc, InvalidInputError) and exc.detail else exc.message
        return JSONResponse(status_code=int(exc.status_code), content={"status": "Error", "error": message})

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/save")
    def save_url(req: SaveRequest) -> Dict[str, Any]:
        """Save `url` under `alias`, generating one when omitted."""
        alias = links.save_url(req.url, req.alias)
        return _ok(alias=alias)

    @app.post("/register")
    def register(req: Credentials) -> Dict[str, Any]:
        user_id = accounts.register_user(req.username, req.password)
        return _ok(id=user_id)

    @app.post("/login")
    def login(req: Credentials) -> Dict[str, Any]:
        token = accounts.login_user(req.username, req.password)
        return _ok(token=token)

    @app.get("/{alias}")
    def redirect(alias: str) -> RedirectResponse:
        """Redirect to the URL stored under `alias` (302), or 404."""
        return RedirectResponse(url=links.resolve_url(alias), status_code=302)

    @app.delete("/{alias}")
    def delete(alias: str) -> Dict[str, Any]:
        links.delete_url(alias)
        return _ok()

    return app


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


# `uvicorn main:app` and `from main import app` keep working.
app = create_app()

if __name__ == "__main__":
    run()
