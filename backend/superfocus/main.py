import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from superfocus import __version__
from superfocus.core.config import get_cors_origins, get_log_level
from superfocus.core.errors import RateLimitExceeded, SuperFocusError
from superfocus.routes import billing, health, homework, illustration, quiz, speech, tutor, voice_settings, youtube

logging.basicConfig(
    level=get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("superfocus")

app = FastAPI(title="SuperFocus API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(speech.router, prefix="/api", tags=["Speech"])
app.include_router(homework.router, prefix="/api/homework", tags=["Homework"])
app.include_router(illustration.router, prefix="/api", tags=["Illustration"])
app.include_router(quiz.router, prefix="/api", tags=["Test Prep"])
app.include_router(tutor.router, prefix="/api", tags=["Tutor"])
app.include_router(youtube.router, prefix="/api", tags=["YouTube"])
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(billing.router, prefix="/api", tags=["Billing"])
app.include_router(voice_settings.router, prefix="/api", tags=["Account"])


@app.exception_handler(SuperFocusError)
async def superfocus_error_handler(request: Request, exc: SuperFocusError):
    if exc.status_code >= 500:
        cause = exc.__cause__
        logger.error(
            f"[API] ❌ {request.method} {request.url.path} -> {exc.status_code}: {exc.message}"
            + (f" ({type(cause).__name__}: {cause})" if cause else "")
        )
    headers = exc.headers() if isinstance(exc, RateLimitExceeded) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"[API] {request.method} {request.url.path} -> 400 invalid request data")
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"[API] ❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    return {"message": "SuperFocus backend is running."}
