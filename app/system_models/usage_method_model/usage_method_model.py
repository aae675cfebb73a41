# app/system_models/usage_method_model/usage_method_model.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from app.database.connection import Base
from app.helpers.time import utcnow


class UsageMethod(Base):
    __tablename__ = "usage_methods"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
