import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from cachetools import TLRUCache
from fastapi import FastAPI, Depends, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import initialize_app, auth
from app.config import settings
from app.core.errors import ApiError, ErrorCode
from .init_db import bootstrap_database

logger = logging.getLogger(__name__)

DEV_USER = {
    "uid": "00000000-0000-4000-8000-000000000001",
    "email": "dev@example.com",
    "name": "Development User",
}

# Initialize Firebase
firebase_app = None

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    global firebase_app
    if settings.is_production:
        try:
            from firebase_admin import credentials as fb_credentials

            cred = fb_credentials.ApplicationDefault()
            options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
            firebase_app = initialize_app(credential=cred, options=options)
            logger.info("Firebase initialized successfully")
        except Exception as e:
            logger.exception("Error initializing Firebase")
            raise e
    else:
        logger.info("Running in development mode - skipping Firebase initialization")

    if settings.auto_create_tables:
        await bootstrap_database()

    yield

    # Shutdown
    if firebase_app:
        firebase_app.delete()
        firebase_app = None

app = FastAPI(title="BeMore API", lifespan=lifespan)
security = HTTPBearer(auto_error=False)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _token_expiry(token, decoded_token, now):
    # Never keep a token past its own exp claim
    return min(now + settings.token_cache_ttl, decoded_token.get("exp", now))

# Decoded ID tokens, so repeat requests skip signature verification
token_cache = TLRUCache(maxsize=settings.token_cache_size, ttu=_token_expiry, timer=time.time)

def _truncate(token: str) -> str:
    return f"{token[:10]}...{token[-10:]}"

# Dependency to get current user from token
async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    if not settings.is_production:
        logger.debug("Development mode - skipping token verification")
        return dict(DEV_USER)

    if credentials is None or not credentials.credentials:
        logger.warning("Request without bearer token")
        raise ApiError(401, ErrorCode.UNAUTHORIZED)

    token = credentials.credentials
    cached = token_cache.get(token)
    if cached is not None:
        return cached

    logger.info(f"Verifying token: {_truncate(token)} (truncated for security)")
    try:
        decoded_token = auth.verify_id_token(token)
    except Exception as e:
        logger.warning(f"Error verifying Firebase ID token {_truncate(token)}: {e}")
        raise ApiError(401, ErrorCode.UNAUTHORIZED, "Invalid authentication token")

    logger.info(f"Successfully decoded token with UID: {decoded_token.get('uid')}")
    token_cache[token] = decoded_token
    return decoded_token

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected invalid request to {request.url.path}")
    error = ApiError(400, ErrorCode.INVALID_REQUEST, details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=400, content=error.to_dict())

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content=ApiError(500, ErrorCode.INTERNAL_ERROR).to_dict())
