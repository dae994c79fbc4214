"""
FastAPI application for distilqa.

Serves ``POST /answer``; the pipeline is built on the first request from the
artifacts under ``DISTILQA_MODEL_DIR``.
"""

from fastapi import FastAPI

from .routes import router


def create_app() -> FastAPI:
    app = FastAPI(
        title="distilqa",
        description="Extractive question answering on a DistilBERT encoder.",
        version="0.1.0",
    )
    app.include_router(router)
    return app
