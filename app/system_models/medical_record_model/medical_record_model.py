# app/system_models/medical_record_model/medical_record_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.database.connection import Base
from app.helpers.time import utcnow


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id", ondelete="RESTRICT"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    symptoms = Column(Text, nullable=False)
    disease_id = Column(Integer, ForeignKey("diseases.id", ondelete="RESTRICT"), nullable=True)
    diagnosis = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")

    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'completed', 'cancelled')", name="check_medical_record_status_values"
        ),
    )

    patient = relationship("Patient", back_populates="medical_records")
    doctor = relationship("User")
    disease = relationship("Disease")
    prescriptions = relationship(
        "PrescriptionDetail",
        back_populates="medical_record",
        cascade="all, delete-orphan",
        order_by="PrescriptionDetail.id",
    )

    def __repr__(self):
        return f"<MedicalRecord(id={self.id}, patient_id={self.patient_id}, status='{self.status}')>"


class PrescriptionDetail(Base):
    __tablename__ = "prescription_details"

    id = Column(Integer, primary_key=True, index=True)
    medical_record_id = Column(
        Integer, ForeignKey("medical_records.id", ondelete="CASCADE"), nullable=False, index=True
    )
    medicine_id = Column(Integer, ForeignKey("medicines.id", ondelete="RESTRICT"), nullable=False)
    usage_method_id = Column(Integer, ForeignKey("usage_methods.id", ondelete="RESTRICT"), nullable=False)
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_prescription_quantity_positive"),
    )

    medical_record = relationship("MedicalRecord", back_populates="prescriptions")
    medicine = relationship("Medicine")
    usage_method = relationship("UsageMethod")
