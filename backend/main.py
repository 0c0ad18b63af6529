import logging
import os

from fastapi import FastAPI, Request, status
import uvicorn
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from core.auth import fastapi_users, auth_backend, ensure_admin_user
from core.config import settings
from core.session_gate import session_gate
from db.database import create_db_and_tables
from routers.announcements import router as announcements_router
from routers.categories import router as categories_router
from routers.pages import router as pages_router
from routers.partners import router as partners_router
from routers.uploads import router as uploads_router
from schemas.users import UserRead, UserUpdate

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_db_and_tables()
    await ensure_admin_user(settings.admin_email, settings.admin_password)
    yield


app = FastAPI(
    title="Partner Admin API",
    description="Admin API for categories, partners and announcements",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.middleware("http")(session_gate)
# Outermost: preflight requests never reach the session gate
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input", "issues": jsonable_encoder(exc.errors())},
    )


# Uploaded images are public so <img src> works without a session
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

# Authentication routes (fastapi-users, cookie session)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/api/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/api/users", tags=["users"])

# Image upload routes
app.include_router(uploads_router, prefix="/api/upload", tags=["uploads"])

# Entity routes
app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
app.include_router(partners_router, prefix="/api/partners", tags=["partners"])
app.include_router(announcements_router, prefix="/api/announcements", tags=["announcements"])

app.include_router(pages_router, tags=["pages"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
