import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, settings as default_settings
from core.context import StoreContext
from core.exception_handlers import setup_exception_handlers
from routers.forms import router as forms_router
from routers.inventory import router as inventory_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = StoreContext.from_settings(settings)
        await store.start()
        app.state.store = store
        try:
            yield
        finally:
            await store.close()

    app = FastAPI(
        title="Inventory API",
        description="Inventory items with photo attachments",
        version="1.0.0",
        docs_url="/api-docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(forms_router, tags=["forms"])
    app.include_router(inventory_router, tags=["inventory"])
    return app


app = create_app()


def build_arg_parser() -> argparse.ArgumentParser:
    # -h is the host flag, so help lives on --help only
    parser = argparse.ArgumentParser(description="Inventory API server", add_help=False)
    parser.add_argument("--help", action="help", help="Show this help message and exit")
    parser.add_argument("-h", "--host", help="Address to bind (default: 0.0.0.0)")
    parser.add_argument("-p", "--port", type=int, help="Port to listen on (default: $PORT or 3000)")
    parser.add_argument("-c", "--cache", help="Directory for stored photos (default: $CACHE_DIR)")
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = Settings(cache_dir=args.cache, host=args.host, port=args.port)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.cache_dir:
        print("Error: required option --cache is not set", file=sys.stderr)
        return 1

    app = create_app(settings)
    logger.info("Starting server on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
