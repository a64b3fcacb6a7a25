from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from billing.errors import BillingError

from app.api.routes import health
from app.core.config import settings
from app.core.logging import bind_request_context, configure_logging, get_logger
from app.core.monitoring import configure_error_monitoring
from app.domains.invoices.router import router as invoices_router
from app.domains.payroll.router import router as payroll_router
from app.domains.reporting.router import router as reporting_router

configure_logging(settings.log_level)
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.include_router(health.router)
app.include_router(payroll_router)
app.include_router(reporting_router)
app.include_router(invoices_router)


@app.middleware("http")
async def request_context(request: Request, call_next):
    bind_request_context(request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(BillingError)
async def billing_error_handler(request: Request, exc: BillingError) -> JSONResponse:
    logger.info("billing_error_rejected", error=str(exc))
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env, data_path=str(settings.data_path))


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Nurse staffing payroll API running", "environment": settings.env}
