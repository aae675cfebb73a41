# app/system_models/medicine_model/medicine_model.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, UniqueConstraint
from app.database.connection import Base
from app.helpers.time import utcnow


class Medicine(Base):
    __tablename__ = "medicines"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    unit = Column(String(20), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("name", "unit", name="uq_medicines_name_unit"),
    )

    def __repr__(self):
        return f"<Medicine(id={self.id}, name='{self.name}', unit='{self.unit}')>"
