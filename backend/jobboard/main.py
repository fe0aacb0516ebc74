import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobboard.config import settings
from jobboard.dependencies import build_store
from jobboard.errors import ConflictError, ForbiddenError, JobBoardError, NotFoundError, StoreError
from jobboard.routers import applications, auth, companies, dashboard, follows, jobs, public

logger = logging.getLogger("jobboard")

_STATUS_FOR = (
    (NotFoundError, 404),
    (ForbiddenError, 403),
    (ConflictError, 409),
    (StoreError, 502),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "store", None) is None:
        app.state.store = build_store()
        logger.info("Document store ready (%s backend).", settings.store_backend)
    yield
    await app.state.store.close()
    app.state.store = None


app = FastAPI(
    title="Job Board",
    description="Regional job board: public listings, employer dashboard and applications",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    fields = {}
    for err in exc.errors():
        # Drop the leading "body"/"query" marker from the location
        path = ".".join(str(part) for part in err["loc"][1:]) or str(err["loc"][0])
        fields.setdefault(path, err["msg"])
    return JSONResponse({"error": "Validation failed", "fields": fields}, status_code=400)


@app.exception_handler(JobBoardError)
async def domain_error(request: Request, exc: JobBoardError):
    status = next((code for cls, code in _STATUS_FOR if isinstance(exc, cls)), 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=status)


@app.exception_handler(ValueError)
async def value_error(request: Request, exc: ValueError):
    return JSONResponse({"error": str(exc)}, status_code=400)


app.include_router(public.router, prefix=settings.api_prefix)
app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(applications.router, prefix=settings.api_prefix)
app.include_router(dashboard.router, prefix=settings.api_prefix)
app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(companies.router, prefix=settings.api_prefix)
app.include_router(follows.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
