from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .models import ErrorBody, EvaluateRequest, EvaluationResult
from .pipeline import EvaluationPipeline


logger = logging.getLogger(__name__)

EVALUATION_FAILED = "Failed to evaluate funding eligibility."


def create_app(settings: Optional[Settings] = None, pipeline: Optional[EvaluationPipeline] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(message)s")
    pipeline = pipeline or EvaluationPipeline(settings)

    app = FastAPI(title="EV Charging Funding Evaluator API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post(
        "/api/evaluate",
        response_model=EvaluationResult,
        responses={500: {"model": ErrorBody}},
    )
    async def evaluate(payload: EvaluateRequest):
        try:
            outcome = await pipeline.run(payload.form)
        except Exception as exc:
            logger.exception("Evaluation failed: %s", exc)
            return JSONResponse(status_code=500, content={"error": EVALUATION_FAILED})
        return EvaluationResult(result=outcome.result)

    return app
