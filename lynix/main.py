from fastapi import FastAPI, Request, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from lynix.config import settings
from lynix.database.connection import init_db, close_db, get_db
from lynix.services.user_service import ensure_bootstrap_admin
from lynix.services.voice_server_service import ensure_default_rooms
from lynix.services.events.hub import event_hub
from lynix.controllers.user_controller import router as user_router
from lynix.controllers.chat_controller import router as chat_router
from lynix.controllers.ai_controller import router as ai_router
from lynix.controllers.events_controller import router as events_router
from lynix.controllers.apps.notepad_controller import router as notepad_router
from lynix.controllers.apps.contact_controller import router as contact_router
from lynix.controllers.apps.local_mail_controller import router as local_mail_router
from lynix.controllers.apps.phone_controller import router as phone_router
from lynix.controllers.apps.voice_server_controller import router as voice_server_router
import logging
import time

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests"""
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(f"Request: {request.method} {request.url.path} from {client_ip}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} ({process_time:.3f}s)")

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    await ensure_default_rooms()
    await ensure_bootstrap_admin(settings.BOOTSTRAP_ADMIN_USERNAME, settings.BOOTSTRAP_ADMIN_PASSWORD)
    logger.info("Database ready")

    yield

    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {str(e)}")


app = FastAPI(
    title="LynxAI API",
    description="Multi-user web desktop backend: chat, phone, voice rooms and productivity apps",
    version="1.0.0",
    lifespan=lifespan
)

# Request logging runs before CORS
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


app.include_router(user_router)
app.include_router(chat_router)
app.include_router(ai_router)
app.include_router(notepad_router)
app.include_router(contact_router)
app.include_router(local_mail_router)
app.include_router(phone_router)
app.include_router(voice_server_router)
app.include_router(events_router)


@app.get("/")
async def root():
    return {"message": "LynxAI API", "status": "running"}


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    await db.execute(text("SELECT 1"))
    return {"status": "healthy", "event_subscribers": event_hub.subscriber_count()}
