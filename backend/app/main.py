from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import health
from app.core.config import settings
from app.core.logging import configure_logging, get_logger
from app.core.monitoring import configure_error_monitoring
from app.core.observability import configure_observability
from app.domains.auth.router import router as auth_router
from app.domains.charge_codes.router import router as charge_code_router
from app.domains.employees.router import router as employee_router
from app.domains.metrics.router import router as metrics_router
from app.domains.periods.router import router as periods_router
from app.domains.time_entries.router import router as time_router
from timesheet.errors import EntryNotFoundError, TimesheetError

configure_logging(settings.log_level, json_output=settings.env != "dev")
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.cors_origins] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(auth_router)
app.include_router(charge_code_router)
app.include_router(time_router)
app.include_router(periods_router)
app.include_router(employee_router)
app.include_router(metrics_router)


@app.exception_handler(TimesheetError)
def timesheet_error_handler(request: Request, exc: TimesheetError) -> JSONResponse:
    status_code = 404 if isinstance(exc, EntryNotFoundError) else 400
    logger.warning("timesheet_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Timesheet API running", "environment": settings.env}
