import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import ADMIN_SECRET, CORS_ORIGINS, LOG_LEVEL
from app.db.db import init_db
from app.routers import admin, department, found_items, lost_items, notifications
from app.services.errors import ErrorKind, LifecycleError
from app.utils.admin_gate import AdminGate

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.ALREADY_MATCHED: 409,
    ErrorKind.DEPENDENCY_EXISTS: 409,
    ErrorKind.CONFLICT: 409,
    ErrorKind.POLICY_VIOLATION: 422,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Lost & Found API", lifespan=lifespan)
app.state.admin_gate = AdminGate(ADMIN_SECRET)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError):
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc.kind.value)

    return JSONResponse(
        status_code=ERROR_STATUS[exc.kind],
        content={
            "success": False,
            "error": {"code": exc.kind.value, "message": exc.message},
        },
    )


# Register routers
app.include_router(lost_items.router, prefix="/api/lost-items", tags=["Lost Items"])
app.include_router(found_items.router, prefix="/api/found-items", tags=["Found Items"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(department.router, prefix="/api", tags=["Directory"])


@app.get("/")
def root():
    return {"status": "ok"}
