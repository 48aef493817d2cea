from sqlalchemy import Column, String, Date, Text, DateTime
from .base import Base, generate_uuid, utcnow


class DailyReport(Base):
    """Free-text daily report filed against a patient. Read-only in this service."""
    __tablename__ = "daily_reports"

    report_id = Column(String, primary_key=True, default=generate_uuid)
    patient_id = Column(String(50), nullable=False, index=True)
    report_date = Column(Date, nullable=False, index=True)
    report_content = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
