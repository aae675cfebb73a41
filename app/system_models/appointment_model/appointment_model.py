# app/system_models/appointment_model/appointment_model.py
from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow

APPOINTMENT_STATUSES = ("waiting", "examined", "completed")


class DailyAppointment(Base):
    __tablename__ = "daily_appointments"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    appointment_date = Column(Date, nullable=False, index=True)
    status = Column(String(20), nullable=False, default="waiting")
    medical_record_id = Column(Integer, ForeignKey("medical_records.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("patient_id", "appointment_date", name="uq_daily_appointments_patient_date"),
        CheckConstraint(
            "status IN ('waiting', 'examined', 'completed')", name="check_appointment_status_values"
        ),
    )

    patient = relationship("Patient", back_populates="appointments")
    medical_record = relationship("MedicalRecord")
    invoice = relationship("Invoice", back_populates="appointment", uselist=False, passive_deletes=True)

    def __repr__(self):
        return f"<DailyAppointment(id={self.id}, patient_id={self.patient_id}, status='{self.status}')>"
