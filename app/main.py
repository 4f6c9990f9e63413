import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.api import api_router
from app.core.config import settings
from app.core.errors import LoyaltyError, ValidationError
from database.connection import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    init_db()
    yield
    # Shutdown


logger = logging.getLogger(__name__)


class DynamicCORSMiddleware(BaseHTTPMiddleware):
    """CORS middleware: configured origins in production, any origin in development."""

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")

        # Handle preflight requests
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        if origin:
            if settings.environment == "production":
                if origin in settings.allowed_origins:
                    response.headers["Access-Control-Allow-Origin"] = origin
                    response.headers["Access-Control-Allow-Credentials"] = "true"
                else:
                    logger.warning(f"CORS rejected - Origin '{origin}' is not allowed")
            else:
                # Development: allow all origins
                response.headers["Access-Control-Allow-Origin"] = origin
                response.headers["Access-Control-Allow-Credentials"] = "true"

        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, X-Requested-With"

        return response


async def loyalty_error_handler(request: Request, exc: LoyaltyError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"error": ValidationError.code, "detail": "; ".join(messages)},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Loyalty Points API",
        description="Phone-number loyalty program: registration, check-ins, points and rewards",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(DynamicCORSMiddleware)

    # Tagged error bodies: {"error": code, "detail": message}
    app.add_exception_handler(LoyaltyError, loyalty_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include all routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
