"""The ASGI app: middleware, rate limiting and the game routes."""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from api.routes import game
from config import config

limiter = Limiter(
    key_func=get_remote_address,
    enabled=config.rate_limit.enabled,
    default_limits=[config.rate_limit.limit],
)


def _too_many_requests(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    return JSONResponse(
        status_code=429,
        content={"detail": f"Too many requests: {exc.detail}"},
    )


app = FastAPI(
    title="Blackjack",
    description="Single-player blackjack rules engine",
    version="0.1.0",
    debug=config.debug,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _too_many_requests)

cors = config.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.allowed_origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)

app.include_router(game.router, prefix="/api/game", tags=["game"])


@app.get("/api/health")
@limiter.limit(config.rate_limit.limit)
async def health_check(request: Request) -> dict[str, str]:
    """Liveness check."""
    return {"status": "healthy"}
