import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from studysphere import config
from studysphere.auth.router import router as auth_router
from studysphere.bookings.router import router as bookings_router
from studysphere.database import create_indexes, db, ping_database
from studysphere.materials.router import router as materials_router
from studysphere.notes.router import router as notes_router
from studysphere.payments.router import router as payments_router
from studysphere.reviews.router import router as reviews_router
from studysphere.study_sessions.router import router as study_sessions_router
from studysphere.tutors.router import router as tutors_router
from studysphere.users.router import router as users_router

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="StudySphere API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    # Bad or missing input is a 400 across the API
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
async def startup_event():
    config.validate_runtime_config()
    try:
        await ping_database(db)
        await create_indexes(db)
    except Exception:
        logger.exception("Database initialization failed. Check MONGO_URL and credentials.")


# ==================== ROUTER REGISTRATION ====================
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tutors_router)
app.include_router(study_sessions_router)
app.include_router(bookings_router)
app.include_router(reviews_router)
app.include_router(payments_router)
app.include_router(notes_router)
app.include_router(materials_router)
# ============================================================


@app.get("/", response_class=PlainTextResponse)
def root():
    return "server is running ..!"
