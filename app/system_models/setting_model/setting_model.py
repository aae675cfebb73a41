# app/system_models/setting_model/setting_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime
from app.database.connection import Base
from app.helpers.time import utcnow


class SystemSetting(Base):
    __tablename__ = "system_settings"

    id = Column(Integer, primary_key=True, index=True)
    setting_key = Column(String(100), unique=True, nullable=False, index=True)
    setting_value = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<SystemSetting {self.setting_key}={self.setting_value}>"
