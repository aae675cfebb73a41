# app/system_models/patient_model/patient_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class Patient(Base):
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)

    full_name = Column(String(100), nullable=False, index=True)
    gender = Column(String(10), nullable=False)
    birth_year = Column(Integer, nullable=False)
    phone_number = Column(String(15), unique=True, nullable=False, index=True)
    address = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("gender IN ('male', 'female')", name="check_gender_values"),
    )

    appointments = relationship("DailyAppointment", back_populates="patient")
    medical_records = relationship("MedicalRecord", back_populates="patient")

    def __repr__(self):
        return f"<Patient {self.id}: {self.full_name}>"
