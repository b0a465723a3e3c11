"""SQLAlchemy models for projtrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    CheckConstraint,
    create_engine,
    event,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="Not Started")
    budget = Column(Numeric(12, 2), nullable=True)
    currency = Column(String(3), nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("budget IS NULL OR budget >= 0", name="ck_project_budget"),)

    # Relationships
    tasks = relationship(
        "Task", back_populates="project", cascade="all, delete-orphan"
    )
    expenditures = relationship(
        "Expenditure", back_populates="project", cascade="all, delete-orphan"
    )


class Task(Base):
    """Task model."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="pending")
    priority = Column(String, nullable=False, default="medium")
    assigned_user_id = Column(Integer, nullable=True)
    created_by = Column(Integer, nullable=True)
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    actual_cost = Column(Numeric(12, 2), nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("actual_cost IS NULL OR actual_cost >= 0", name="ck_task_actual_cost"),
    )

    # Relationships
    project = relationship("Project", back_populates="tasks")
    time_entries = relationship(
        "TimeEntry", back_populates="task", cascade="all, delete-orphan"
    )
    comments = relationship(
        "Comment", back_populates="task", cascade="all, delete-orphan"
    )


class Expenditure(Base):
    """Project-level expenditure model."""

    __tablename__ = "expenditures"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    expense_date = Column(Date, nullable=False)
    recorded_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("amount > 0", name="ck_expenditure_amount"),)

    project = relationship("Project", back_populates="expenditures")


class TimeEntry(Base):
    """Time entry model (duration in minutes)."""

    __tablename__ = "time_entries"

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, nullable=True)
    date_worked = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (CheckConstraint("duration > 0", name="ck_time_entry_duration"),)

    task = relationship("Task", back_populates="time_entries")


class Comment(Base):
    """Task comment model."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, nullable=True)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    task = relationship("Task", back_populates="comments")


class OutboxEvent(Base):
    """Lifecycle event written alongside the change that raised it."""

    __tablename__ = "outbox_events"

    id = Column(Integer, primary_key=True)
    kind = Column(String, nullable=False)
    entity_type = Column(String, nullable=False)
    entity_id = Column(Integer, nullable=False)
    actor_id = Column(Integer, nullable=True)
    payload = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    delivered_at = Column(DateTime, nullable=True)
    attempts = Column(Integer, nullable=False, default=0)
    last_error = Column(Text, nullable=True)


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """Turn on FK enforcement (and ON DELETE CASCADE) for SQLite connections."""
    module = type(dbapi_connection).__module__
    if module.startswith("sqlite3") or module.startswith("pysqlite"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
