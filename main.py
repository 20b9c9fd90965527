# main.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config import Settings, configure_logging, get_settings
from engines.priority_engine import PriorityEngine
from engines.scenarios import build_scenarios
from ingest_bot import start_ingest_bot
from models import BatchRequest, PriorityRequest, RecalculateRequest

logger = logging.getLogger(__name__)


def get_engine(request: Request) -> PriorityEngine:
    return request.app.state.engine


def create_app(engine: Optional[PriorityEngine] = None, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    engine = engine or PriorityEngine(max_workers=settings.batch_max_workers)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        scheduler = None
        if settings.ingest_enabled:
            scheduler = start_ingest_bot(engine, settings)
        app.state.ingest_bot = scheduler is not None
        logger.info("🚀 Priority Engine running (ingest bot: %s)", app.state.ingest_bot)
        yield
        if scheduler is not None:
            scheduler.shutdown(wait=False)

    app = FastAPI(title=settings.app_title, lifespan=lifespan)
    app.state.engine = engine
    app.state.ingest_bot = False

    @app.exception_handler(Exception)
    async def internal_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )

    @app.post("/api/priority/calculate")
    def calculate_priority(req: PriorityRequest, engine: PriorityEngine = Depends(get_engine)):
        return {"success": True, "data": engine.calculate_priority(req)}

    @app.post("/api/priority/batch")
    def batch_calculate(req: BatchRequest, engine: PriorityEngine = Depends(get_engine)):
        results = engine.batch_calculate(req.inputs)
        return {"success": True, "data": results, "count": len(results)}

    @app.post("/api/priority/recalculate")
    def recalculate(req: RecalculateRequest, engine: PriorityEngine = Depends(get_engine)):
        try:
            result = engine.recalculate(req.original_input, req.context_updates)
        except ValidationError as e:
            raise HTTPException(
                status_code=422,
                detail=e.errors(include_url=False, include_context=False, include_input=False),
            )
        return {
            "success": True,
            "data": result,
            "message": "Priority recalculated with updated context",
        }

    @app.get("/api/priority/explain")
    def explain(engine: PriorityEngine = Depends(get_engine)):
        return {"success": True, "data": engine.explain()}

    @app.post("/api/priority/simulate")
    def simulate(engine: PriorityEngine = Depends(get_engine)):
        now = datetime.now(timezone.utc)
        results = [
            {"scenario": name, "input": inp, "result": engine.calculate_priority(inp, now)}
            for name, inp in build_scenarios(now)
        ]
        return {"success": True, "data": results, "message": "Priority simulation completed"}

    @app.get("/health")
    def health(request: Request):
        return {"status": "ok", "ingest_bot": request.app.state.ingest_bot}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
