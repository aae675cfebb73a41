# app/system_models/unit_model/unit_model.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from app.database.connection import Base
from app.helpers.time import utcnow


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(20), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
