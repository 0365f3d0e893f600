from sqlalchemy import Column, Integer, String, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, value_enum
from coaching_api.schemas.enums import AttendanceStatus


class AttendanceEntry(Base):
    """One student's status inside an attendance record"""
    __tablename__ = "attendance_entries"
    __table_args__ = (
        UniqueConstraint("record_id", "student_id", name="uq_attendance_entry_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    record_id = Column(Integer, ForeignKey("attendance_records.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(value_enum(AttendanceStatus), nullable=False)
    remarks = Column(String, nullable=True)

    record = relationship("AttendanceRecord", back_populates="entries")


class AttendanceRecord(TimestampMixin, Base):
    """
    Attendance for one batch on one calendar date. Lives outside the Batch
    aggregate and is removed explicitly when its batch is deleted.
    """
    __tablename__ = "attendance_records"
    __table_args__ = (
        UniqueConstraint("batch_id", "date", name="uq_attendance_batch_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    marked_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    entries = relationship(
        AttendanceEntry,
        back_populates="record",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=AttendanceEntry.id,
    )

    def entry_for(self, student_id: int):
        return next((e for e in self.entries if e.student_id == student_id), None)

    def __repr__(self):
        return f"<AttendanceRecord(id={self.id}, batch_id={self.batch_id}, date={self.date})>"
