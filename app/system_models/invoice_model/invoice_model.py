# app/system_models/invoice_model/invoice_model.py
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    medical_record_id = Column(
        Integer, ForeignKey("medical_records.id", ondelete="RESTRICT"), nullable=False
    )
    daily_appointment_id = Column(
        Integer, ForeignKey("daily_appointments.id", ondelete="RESTRICT"), nullable=False, unique=True
    )

    # Fee is copied from settings at creation time
    consultation_fee = Column(Numeric(12, 2), nullable=False)
    medicine_fee = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False)
    payment_status = Column(String(20), nullable=False, default="pending")

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint("payment_status IN ('pending', 'paid')", name="check_payment_status_values"),
    )

    patient = relationship("Patient")
    medical_record = relationship("MedicalRecord")
    appointment = relationship("DailyAppointment", back_populates="invoice")

    def __repr__(self):
        return f"<Invoice(id={self.id}, total={self.total_amount}, status='{self.payment_status}')>"
