#!/usr/bin/env python3
"""
Sentimiento - Spanish sentiment analysis service
FastAPI application with Hugging Face inference and a local heuristic fallback
"""

import os
from datetime import datetime, UTC
from typing import Any

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from config import get_config
from services.analyzer import SentimentAnalyzer
from services.logging_utils import get_logger
from services.observability import (
    elapsed,
    metrics_router,
    record_request_metrics,
    request_id_for,
    request_timer,
)
from services.profiles import list_profiles
from services.request_limits import BodySizeLimitMiddleware

# Initialize logger
logger = get_logger(__name__)

# Global state
analyzer = SentimentAnalyzer()

# Initialize FastAPI app
app = FastAPI(
    title="Sentimiento",
    description="Sentiment analysis for short Spanish texts",
    version=get_config().VERSION
)

# Body size limit, read from the live config on every request
app.add_middleware(BodySizeLimitMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_config().ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(metrics_router)

# Pydantic models for API; fields are validated by hand to answer 400 instead of 422
class AnalyzeRequest(BaseModel):
    text: Any = None
    model: Any = None

class BatchRequest(BaseModel):
    texts: Any = None
    model: Any = None


def _model_id(value: Any) -> str:
    return value if isinstance(value, str) and value else get_config().DEFAULT_MODEL


@app.middleware("http")
async def observe_requests(request: Request, call_next):
    """Tag responses with a request id and record metrics"""
    start_time = request_timer()
    request_id = request_id_for(request)

    response = await call_next(request)

    response.headers[get_config().REQUEST_ID_HEADER] = request_id
    record_request_metrics(request, response.status_code, elapsed(start_time))
    return response

@app.post("/api/analyze")
async def analyze_text(request: AnalyzeRequest):
    """Analyze a single text"""
    if not request.text or not isinstance(request.text, str):
        raise HTTPException(status_code=400, detail='El campo "text" (string) es requerido')

    try:
        return await analyzer.analyze(request.text, _model_id(request.model))
    except Exception as e:
        logger.error(f"Analysis error: {e}")
        raise HTTPException(status_code=500, detail=f"Error interno del servidor: {e}")

@app.post("/api/analyze-batch")
async def analyze_batch(request: BatchRequest):
    """Analyze a list of texts with the local engine"""
    if not isinstance(request.texts, list):
        raise HTTPException(status_code=400, detail='El campo "texts" debe ser un array')

    try:
        results = analyzer.analyze_batch(request.texts, _model_id(request.model))
        return {
            "success": True,
            "results": results,
            "total": len(request.texts),
            "timestamp": datetime.now(UTC).isoformat()
        }
    except Exception as e:
        logger.error(f"Batch analysis error: {e}")
        raise HTTPException(status_code=500, detail=f"Error en análisis por lotes: {e}")

@app.get("/api/models")
async def get_models():
    """List the selectable model profiles"""
    return {"models": list_profiles()}

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "engine": "Local NLP + Hugging Face (si está configurado)",
        "hf_enabled": analyzer.remote_enabled,
        "timestamp": datetime.now(UTC).isoformat(),
        "version": get_config().VERSION
    }

# Serve the frontend; mounted last so it never shadows the API routes
if os.path.isdir(get_config().STATIC_DIR):
    app.mount("/", StaticFiles(directory=get_config().STATIC_DIR, html=True), name="static")

# Startup event
@app.on_event("startup")
async def startup_event():
    """Log the effective setup on startup"""
    logger.info(
        f"Starting Sentimiento v{get_config().VERSION} "
        f"(Hugging Face {'enabled' if analyzer.remote_enabled else 'disabled'})"
    )

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down Sentimiento...")
    await analyzer.aclose()

if __name__ == "__main__":
    config = get_config()
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=config.PORT,
        reload=config.APP_ENV == "development"
    )
