import logging
import traceback
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import all models first to ensure SQLAlchemy metadata is properly initialized
from .src.config import ALLOWED_ORIGINS, LOG_LEVEL
from .src.models.auth_models import User
from .src.models_geo import Destination, DestinationImage
from .src.models_feedback import Feedback, Favorite
from .src.services.errors import ServiceError

# Import routers after models
from .src.api.destinations import router as destinations_router
from .src.api.auth import router as auth_router

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="YallaR7la API")

# CORS middleware must be added before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


def make_cors_response(request: Request, status_code: int, content: dict):
    """Helper function to create JSONResponse with CORS headers."""
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={
            "Access-Control-Allow-Origin": request.headers.get("origin", ALLOWED_ORIGINS[0] if ALLOWED_ORIGINS else "*"),
            "Access-Control-Allow-Credentials": "true",
        }
    )


# Exception handlers to ensure CORS headers are always present
@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    """Render domain errors raised by the service layer."""
    return make_cors_response(request, exc.status_code, {"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are reported as 400 invalid input."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return make_cors_response(
        request,
        400,
        {"detail": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return make_cors_response(
        request,
        exc.status_code,
        {"detail": exc.detail}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    error_detail = traceback.format_exc()
    logger.error(f"Unhandled exception: {exc}\n{error_detail}")
    return make_cors_response(
        request,
        500,
        {"detail": "Internal server error."}
    )


@app.get("/health")
def health():
    return {"ok": True, "origins": ALLOWED_ORIGINS}


app.include_router(destinations_router)
app.include_router(auth_router)
