"""
SQLAlchemy models for the school CMS.
All database models inherit from Base (declarative base).
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from school_cms.database import Base


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _created_at():
    return Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)


def _updated_at():
    return Column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


class User(Base):
    """Admin / editor account. Login itself is handled outside this service."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=generate_id)
    email = Column(String, nullable=False, unique=True, index=True)
    password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="ADMIN")
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class StaffMember(Base):
    __tablename__ = "staff_members"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    grade = Column(String, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()


class BoardMember(Base):
    """Governing body member."""
    __tablename__ = "board_members"

    id = Column(String, primary_key=True, default=generate_id)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    position = Column(String, nullable=True)
    type = Column(String, nullable=False, default="BOARD")
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    bio = Column(Text, nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()


class NewsArticle(Base):
    __tablename__ = "news_articles"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    summary = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    author_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Event(Base):
    __tablename__ = "events"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    location = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()


class AcademicCalendar(Base):
    """Calendar entry: holidays, exams, school functions."""
    __tablename__ = "academic_calendar"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    type = Column(String, nullable=False, default="EVENT")
    is_holiday = Column(Boolean, nullable=False, default=False)
    is_exam = Column(Boolean, nullable=False, default=False)
    is_public_holiday = Column(Boolean, nullable=False, default=False)
    grade = Column(String, nullable=False, default="all")
    category = Column(String, nullable=True)
    location = Column(String, nullable=True)
    time = Column(String, nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Term(Base):
    __tablename__ = "terms"
    __table_args__ = (UniqueConstraint("year", "term_number", name="uq_terms_year_term_number"),)

    id = Column(String, primary_key=True, default=generate_id)
    year = Column(Integer, nullable=False)
    term_number = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()


class Application(Base):
    """Admissions application. Integer keyed, so its sequence is reset after imports."""
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    surname = Column(String, nullable=False)
    christian_name = Column(String, nullable=False)
    date_of_birth = Column(String, nullable=False)
    place_of_birth = Column(String, nullable=True)
    grade_applying = Column(String, nullable=False)
    year = Column(String, nullable=False)
    last_grade_passed = Column(String, nullable=True)
    home_language = Column(String, nullable=True)
    religious_denomination = Column(String, nullable=True)
    mother_full_name = Column(String, nullable=True)
    mother_cell_phone = Column(String, nullable=True)
    mother_email = Column(String, nullable=True)
    father_full_name = Column(String, nullable=True)
    father_cell_phone = Column(String, nullable=True)
    father_email = Column(String, nullable=True)
    learner_address = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="PENDING")
    notes = Column(Text, nullable=True)
    submitted_at = _created_at()
    updated_at = _updated_at()

    documents = relationship("ApplicationDocument", back_populates="application", passive_deletes=True)


class ApplicationDocument(Base):
    __tablename__ = "application_documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, index=True)
    document_type = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    original_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    uploaded_at = _created_at()

    application = relationship("Application", back_populates="documents")


class DocumentType(Base):
    """Document kinds an application may require (birth certificate, school report, ...)."""
    __tablename__ = "document_types"

    id = Column(String, primary_key=True, default=generate_id)
    code = Column(String, nullable=False, unique=True)
    label = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_required = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()


class SchoolStatistic(Base):
    __tablename__ = "school_statistics"

    id = Column(String, primary_key=True, default=generate_id)
    key = Column(String, nullable=False, unique=True)
    value = Column(String, nullable=False)
    label = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    type = Column(String, nullable=False, default="number")
    display_order = Column(Integer, nullable=False, default=0)
    is_visible = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Album(Base):
    """
    Gallery album.
    cover_image_id points at a gallery item; the FK is created after both
    tables exist because gallery_items also references albums.
    """
    __tablename__ = "albums"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    album_type = Column(String, nullable=False, default="GENERAL")
    class_grade = Column(String, nullable=True)
    cover_image_id = Column(
        String,
        ForeignKey("gallery_items.id", ondelete="SET NULL", use_alter=True),
        nullable=True,
    )
    is_published = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()

    cover_image = relationship("GalleryItem", foreign_keys=[cover_image_id], post_update=True)
    items = relationship(
        "GalleryItem",
        back_populates="album",
        foreign_keys="GalleryItem.album_id",
        order_by="GalleryItem.created_at.desc()",
    )


class GalleryItem(Base):
    """
    Gallery image or video.
    tags holds a JSON-encoded list of strings (see school_cms.utils.tags).
    """
    __tablename__ = "gallery_items"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, nullable=False, default="GENERAL", index=True)
    type = Column(String, nullable=False, default="IMAGE")
    file_path = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    original_name = Column(String, nullable=False)
    file_size = Column(Integer, nullable=False)
    mime_type = Column(String, nullable=False)
    tags = Column(Text, nullable=True)
    is_published = Column(Boolean, nullable=False, default=True)
    uploaded_by = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    album_id = Column(String, ForeignKey("albums.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = _created_at()
    updated_at = _updated_at()

    album = relationship("Album", back_populates="items", foreign_keys=[album_id])
    uploader = relationship("User")


class Newsletter(Base):
    __tablename__ = "newsletters"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    priority = Column(String, nullable=False, default="NORMAL")
    status = Column(String, nullable=False, default="DRAFT")
    target_audience = Column(String, nullable=False, default="ALL")
    grade_levels = Column(Text, nullable=True)
    attachments = Column(Text, nullable=True)
    scheduled_for = Column(DateTime(timezone=True), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Policy(Base):
    __tablename__ = "policies"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    category = Column(String, nullable=False, default="GENERAL")
    version = Column(String, nullable=False, default="1.0")
    pdf_url = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    uploaded_by = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Vacancy(Base):
    __tablename__ = "vacancies"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    department = Column(String, nullable=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=True)
    location = Column(String, nullable=True)
    employment_type = Column(String, nullable=False, default="FULL_TIME")
    closing_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()


class Report(Base):
    """Published school report (annual report, financial statement, ...)."""
    __tablename__ = "reports"

    id = Column(String, primary_key=True, default=generate_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    type = Column(String, nullable=False, default="ANNUAL")
    pdf_url = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()
