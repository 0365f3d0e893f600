from sqlalchemy import (
    Column, Integer, String, Float, Date, DateTime, Text, ForeignKey, Table, UniqueConstraint
)
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, utcnow, value_enum
from coaching_api.schemas.enums import Weekday, PaymentMethod, PaymentStatus


batch_students = Table(
    "batch_students",
    Base.metadata,
    Column("batch_id", Integer, ForeignKey("batches.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Announcement(TimestampMixin, Base):
    __tablename__ = "announcements"

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    batch = relationship("Batch", back_populates="announcements")

    def __repr__(self):
        return f"<Announcement(id={self.id}, batch_id={self.batch_id}, title={self.title})>"


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"
    __table_args__ = (
        UniqueConstraint("batch_id", "day", "hour", name="uq_timetable_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    day = Column(value_enum(Weekday), nullable=False)
    hour = Column(Integer, nullable=False)
    subject = Column(String, nullable=False)
    teacher = Column(String, nullable=True)  # display name, not an account
    start_time = Column(String, nullable=True)
    end_time = Column(String, nullable=True)

    batch = relationship("Batch", back_populates="timetable_entries")

    def __repr__(self):
        return f"<TimetableEntry(batch_id={self.batch_id}, day={self.day}, hour={self.hour})>"


class StudentMark(Base):
    __tablename__ = "student_marks"
    __table_args__ = (
        UniqueConstraint("test_id", "student_id", name="uq_student_mark"),
    )

    id = Column(Integer, primary_key=True, index=True)
    test_id = Column(Integer, ForeignKey("test_results.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    marks = Column(Float, nullable=False)
    remarks = Column(String, nullable=True)

    test = relationship("TestResult", back_populates="student_marks")


class TestResult(TimestampMixin, Base):
    __test__ = False  # keep pytest from collecting the model
    __tablename__ = "test_results"

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    exam_name = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    maximum_marks = Column(Float, nullable=False)
    exam_date = Column(Date, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    batch = relationship("Batch", back_populates="tests")
    student_marks = relationship(
        "StudentMark",
        back_populates="test",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=StudentMark.id,
    )

    def mark_for(self, student_id: int):
        return next((m for m in self.student_marks if m.student_id == student_id), None)

    def __repr__(self):
        return f"<TestResult(id={self.id}, exam_name={self.exam_name}, subject={self.subject})>"


class FeePayment(TimestampMixin, Base):
    __tablename__ = "fee_payments"
    __table_args__ = (
        UniqueConstraint("batch_id", "student_id", name="uq_fee_payment_student"),
    )

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(Integer, ForeignKey("batches.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Float, nullable=False)
    payment_method = Column(value_enum(PaymentMethod), nullable=False)
    status = Column(value_enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING)
    remarks = Column(String, nullable=True)
    payment_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    batch = relationship("Batch", back_populates="fee_payments")


class Batch(TimestampMixin, Base):
    """
    Aggregate root for a class group. Child collections are loaded eagerly
    and every write bumps `version`, so a writer holding a stale copy fails
    at flush time instead of overwriting another request's changes.
    """
    __tablename__ = "batches"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    batch_code = Column(String, unique=True, nullable=False, index=True)
    class_name = Column(String, nullable=False)
    teacher_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    version = Column(Integer, nullable=False)

    teacher = relationship("User", lazy="selectin", foreign_keys=[teacher_id])
    students = relationship("User", secondary=batch_students, lazy="selectin")
    announcements = relationship(
        Announcement,
        back_populates="batch",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=[Announcement.created_at.desc(), Announcement.id.desc()],
    )
    timetable_entries = relationship(
        TimetableEntry,
        back_populates="batch",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=[TimetableEntry.hour, TimetableEntry.id],
    )
    tests = relationship(
        TestResult,
        back_populates="batch",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=TestResult.id,
    )
    fee_payments = relationship(
        FeePayment,
        back_populates="batch",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by=FeePayment.id,
    )

    __mapper_args__ = {"version_id_col": version}

    def has_student(self, student_id: int) -> bool:
        return any(student.id == student_id for student in self.students)

    @property
    def student_ids(self):
        return [student.id for student in self.students]

    def __repr__(self):
        return f"<Batch(id={self.id}, batch_code={self.batch_code}, teacher_id={self.teacher_id})>"
