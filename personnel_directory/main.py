import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from personnel_directory.api.audit import router as audit_router
from personnel_directory.api.birthday import router as birthday_router
from personnel_directory.api.employees import router as employees_router
from personnel_directory.api.health import router as health_router
from personnel_directory.api.root import router as root_router
from personnel_directory.core.config import settings
from personnel_directory.core.errors import register_error_handlers
from personnel_directory.core.log_config import configure_logging
from personnel_directory.core.scheduler import DailyTrigger, run_scheduled_birthday_job

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    trigger = None
    if settings.BIRTHDAY_SCHEDULER_ENABLED:
        hour, minute = settings.birthday_send_time
        trigger = DailyTrigger(hour, minute, run_scheduled_birthday_job, name="birthday_messages")
        trigger.start()
    else:
        logger.info("Birthday scheduler disabled")

    yield

    if trigger is not None:
        await trigger.stop()


app = FastAPI(title="Personnel Directory", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(employees_router, prefix="/api")
app.include_router(birthday_router, prefix="/api")
app.include_router(audit_router, prefix="/api")
