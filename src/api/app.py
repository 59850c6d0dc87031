"""FastAPI application factory"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import ClientError, client_error_handler
from src.api.routes import ledger, migration, rentals


def create_app(config) -> FastAPI:
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Rental Ledger Service",
        description="Rentals, their payments, expenses and dues, and legacy data migration",
        version="1.0.0",
        root_path=config.API_PREFIX,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=config.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ClientError, client_error_handler)

    app.include_router(rentals.router)
    app.include_router(ledger.router)
    app.include_router(migration.router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
