"""
Clinic Diagnosis Support - FastAPI Application

Main application entry point with API endpoints for:
- Rule-based diagnosis evaluation (anamnesis + lab markers)
- Diagnosis records (analyze, list, get, review)
- Health checks
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import config
from app.models.diagnosis import HealthResponse
from app.routes.diagnosis import router as diagnosis_router
from app.utils import ClinicDiagnosisError, get_logger

logger = get_logger(__name__)


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Clinic Diagnosis API v{config.API_VERSION} ready to accept requests")
    yield
    logger.info("Clinic Diagnosis API shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title="Clinic Diagnosis Support API",
    description="Deterministic diagnosis support from anamnesis answers and lab markers",
    version=config.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(diagnosis_router)


@app.exception_handler(ClinicDiagnosisError)
async def clinic_error_handler(request: Request, exc: ClinicDiagnosisError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ---- Health ----

def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=config.API_VERSION,
        timestamp=datetime.now(timezone.utc),
    )


@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return _health()


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
