# app/main.py
from dotenv import load_dotenv

load_dotenv()

import logging
import logging.config
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.appconfig import settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

from app.database.connection import engine, init_models
from app.helpers.exceptions import register_exception_handlers

# Import routers
from app.system_services.appointment_routes import router as appointment_router
from app.system_services.invoice_routes import router as invoice_router
from app.system_services.medical_record_routes import router as medical_record_router
from app.system_services.patient_routes import router as patient_router
from app.system_services.reference_routes import (
    disease_router,
    medicine_router,
    unit_router,
    usage_method_router,
)
from app.system_services.report_routes import router as report_router
from app.system_services.setting_routes import router as setting_router
from app.users.auth_routers import router as auth_router
from app.users.user_routers import router as user_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("===============================================================================")
    logger.info(f" 🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
    logger.info(f" ✅ Database: {engine.url.render_as_string(hide_password=True)}")
    logger.info(f" ✅ Clinic timezone: {settings.CLINIC_TIMEZONE}")
    logger.info(f" ✅ Forward-only status changes: {settings.ENFORCE_FORWARD_STATUS_TRANSITIONS}")
    logger.info("===============================================================================")
    await init_models()
    yield
    # Shutdown
    await engine.dispose()
    logger.info("👋 Shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="Patient registration, daily queue, medical records, invoicing and reports",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers with prefixes
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(user_router, prefix="/api/users", tags=["Users"])
app.include_router(patient_router, prefix="/api/patients", tags=["Patients"])
app.include_router(appointment_router, prefix="/api/appointments", tags=["Appointments"])
app.include_router(medical_record_router, prefix="/api/medical-records", tags=["Medical Records"])
app.include_router(invoice_router, prefix="/api/invoices", tags=["Invoices"])
app.include_router(medicine_router, prefix="/api/medicines", tags=["Medicines"])
app.include_router(disease_router, prefix="/api/diseases", tags=["Diseases"])
app.include_router(unit_router, prefix="/api/units", tags=["Units"])
app.include_router(usage_method_router, prefix="/api/usage-methods", tags=["Usage Methods"])
app.include_router(setting_router, prefix="/api/settings", tags=["Settings"])
app.include_router(report_router, prefix="/api/reports", tags=["Reports"])


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "OK", "message": f"{settings.APP_NAME} is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=settings.is_development)
