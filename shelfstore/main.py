# shelfstore/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shelfstore.config import settings
from shelfstore.database import SessionLocal, init_db
from shelfstore.errors import WarehouseError
from shelfstore.services.users import ensure_admin
from shelfstore.utils.policy import Action
from shelfstore.utils.tokenJWT import require

# Routers
from shelfstore.routes.auth import router as auth_router
from shelfstore.routes.admin import router as admin_router
from shelfstore.routes.products import router as products_router
from shelfstore.routes.shelves import router as shelves_router
from shelfstore.routes.logs import router as logs_router

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Error kind -> HTTP status
ERROR_STATUS = {
    "not_found": 404,
    "duplicate_key": 409,
    "insufficient_volume": 409,
    "referential_conflict": 409,
    "forbidden": 403,
}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(WarehouseError)
    async def _warehouse_error(request: Request, exc: WarehouseError):
        return JSONResponse(
            status_code=ERROR_STATUS.get(exc.kind, 400),
            content={"error": exc.message, "kind": exc.kind},
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Schema and initial admin are set up once, before serving requests
    init_db()
    if settings.SEED_ADMIN:
        db = SessionLocal()
        try:
            ensure_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)
        finally:
            db.close()
    logger.info("Shelfstore API ready")
    yield


app = FastAPI(title="Shelfstore API", version="1.0.0", lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

api = APIRouter(prefix="/api")
api.include_router(auth_router)
api.include_router(admin_router)
api.include_router(products_router)
api.include_router(shelves_router)
api.include_router(logs_router)


@api.get("/health")
def health(current_user=Depends(require(Action.READ))):
    return {"status": "ok"}


app.include_router(api)
