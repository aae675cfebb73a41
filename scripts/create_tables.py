# scripts/create_tables.py
#  to run the script, run the following command:
#  python scripts/create_tables.py

"""
Database Setup Script
Creates every table and seeds the default staff accounts, reference data and
clinic settings. Safe to re-run: rows that already exist are left alone.
"""
import sys
import asyncio
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.connection import SessionLocal, engine, init_models
from app.model_registry import Disease, Medicine, Patient, SystemSetting, UsageMethod, Unit, User
from app.system_services.setting_services import default_settings
from app.users.security import get_password_hash

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_PASSWORD = "password"

DEFAULT_USERS = [("admin", "admin"), ("receptionist1", "receptionist"), ("doctor1", "doctor")]
DEFAULT_UNITS = ["tablet", "bottle", "tube", "sachet", "ml", "mg"]
DEFAULT_USAGE_METHODS = [
    "Take after meals",
    "Take before meals",
    "Take on an empty stomach",
    "Apply to skin",
    "Eye drops",
    "Nasal drops",
    "Intramuscular injection",
    "Intravenous injection",
]
DEFAULT_DISEASES = [
    ("Influenza", "Viral illness with fever, cough and headache"),
    ("Pharyngitis", "Inflammation of the throat"),
    ("Gastritis", "Stomach and digestive complaints"),
    ("Hypertension", "Blood pressure above the normal range"),
    ("Diabetes", "Disorder of blood glucose metabolism"),
]
DEFAULT_MEDICINES = [
    ("Paracetamol 500mg", "tablet", 2000),
    ("Amoxicillin 500mg", "tablet", 5000),
    ("Omeprazole 20mg", "tablet", 3000),
    ("Metformin 500mg", "tablet", 4000),
    ("Lisinopril 10mg", "tablet", 6000),
    ("Vitamin C 1000mg", "tablet", 1500),
]


async def _missing(db: AsyncSession, model, *criteria) -> bool:
    return (await db.execute(select(model.id).where(*criteria))).first() is None


async def seed_defaults(db: AsyncSession) -> None:
    """Insert default rows that are not there yet."""
    hashed = get_password_hash(DEFAULT_PASSWORD)
    for username, role in DEFAULT_USERS:
        if await _missing(db, User, User.username == username):
            db.add(User(username=username, hashed_password=hashed, role=role))
    logger.info("✅ Default users")

    for name in DEFAULT_UNITS:
        if await _missing(db, Unit, Unit.name == name):
            db.add(Unit(name=name))
    logger.info("✅ Default units")

    for name in DEFAULT_USAGE_METHODS:
        if await _missing(db, UsageMethod, UsageMethod.name == name):
            db.add(UsageMethod(name=name))
    logger.info("✅ Default usage methods")

    for name, description in DEFAULT_DISEASES:
        if await _missing(db, Disease, Disease.name == name):
            db.add(Disease(name=name, description=description))
    logger.info("✅ Default diseases")

    for name, unit, price in DEFAULT_MEDICINES:
        if await _missing(db, Medicine, Medicine.name == name, Medicine.unit == unit):
            db.add(Medicine(name=name, unit=unit, price=price))
    logger.info("✅ Default medicines")

    for key, (value, description) in default_settings().items():
        if await _missing(db, SystemSetting, SystemSetting.setting_key == key):
            db.add(SystemSetting(setting_key=key, setting_value=value, description=description))
    logger.info("✅ System settings")

    await db.commit()


async def main():
    await init_models()
    async with SessionLocal() as db:
        await seed_defaults(db)
        for model in (User, Patient, Medicine):
            count = await db.scalar(select(func.count()).select_from(model))
            logger.info(f"   {model.__tablename__}: {count}")
    await engine.dispose()

    logger.info("🎉 Database setup completed successfully!")
    logger.warning(f"Default accounts use the password '{DEFAULT_PASSWORD}'; change them after first login")


if __name__ == "__main__":
    asyncio.run(main())
