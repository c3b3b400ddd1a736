from sqlalchemy import (
    Column, Integer, Text, Boolean, ForeignKey, DateTime, func, Index
)
from sqlalchemy.orm import relationship
import sqlalchemy as sa
from .database import Base, table_name
from datetime import datetime, timezone


def _ref(table: str, column: str = "id") -> str:
    return f"{table_name(table)}.{column}"


# ---------------------------
# USERS & IDENTITY
# ---------------------------
class User(Base):
    __tablename__ = table_name("user")

    id = Column(Integer, primary_key=True)
    email = Column(Text, unique=True, nullable=True)
    email_verified = Column("emailVerified", DateTime, nullable=True)
    is_premium = Column("isPremium", Boolean, nullable=False, default=False, server_default=sa.false())
    is_admin = Column("isAdmin", Boolean, nullable=False, default=False, server_default=sa.false())

    # owner-side collections; the database does the cascading
    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    profile = relationship(
        "Profile",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    comments = relationship(
        "Comment",
        back_populates="user",
        foreign_keys="Comment.user_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    progress = relationship("Progress", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    testimonials = relationship(
        "Testimonial",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User {self.id} {self.email}>"


class Account(Base):
    __tablename__ = table_name("accounts")

    id = Column(Integer, primary_key=True)
    user_id = Column("userId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), nullable=False)
    google_id = Column("googleId", Text, unique=True, nullable=True)  # one external login per google account

    user = relationship("User", back_populates="accounts")

    __table_args__ = (
        Index("user_id_google_id_idx", "userId", "googleId"),
    )


class Profile(Base):
    __tablename__ = table_name("profile")

    id = Column(Integer, primary_key=True)
    user_id = Column(
        "userId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), unique=True, nullable=False
    )
    display_name = Column("displayName", Text, nullable=True)
    image_id = Column("imageId", Text, nullable=True)
    image = Column(Text, nullable=True)
    bio = Column(Text, nullable=False, default="", server_default="")

    user = relationship("User", back_populates="profile")


class Session(Base):
    __tablename__ = table_name("session")

    id = Column(Text, primary_key=True)  # opaque token
    user_id = Column("userId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="sessions")

    __table_args__ = (
        Index("sessions_user_id_idx", "userId"),
    )

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        # naive values (e.g. read back from SQLite) are UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now >= expires_at


# ---------------------------
# COURSE CONTENT
# ---------------------------
class Module(Base):
    __tablename__ = table_name("module")

    id = Column(Integer, primary_key=True)
    title = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)  # display sequence, no default
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    segments = relationship(
        "Segment",
        back_populates="module",
        order_by="Segment.order.asc()",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Segment(Base):
    __tablename__ = table_name("segment")

    id = Column(Integer, primary_key=True)
    slug = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    order = Column(Integer, nullable=False)  # scoped to the module
    length = Column(Text, nullable=True)
    is_premium = Column("isPremium", Boolean, nullable=False, default=False, server_default=sa.false())
    module_id = Column("moduleId", Integer, ForeignKey(_ref("module"), ondelete="CASCADE"), nullable=False)
    video_key = Column("videoKey", Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    module = relationship("Module", back_populates="segments")
    attachments = relationship(
        "Attachment",
        back_populates="segment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments = relationship(
        "Comment",
        back_populates="segment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    progress = relationship("Progress", back_populates="segment", cascade="all, delete-orphan", passive_deletes=True)

    __table_args__ = (
        Index("segments_slug_idx", "slug"),
    )

    def __repr__(self):
        return f"<Segment {self.slug}>"


class Attachment(Base):
    __tablename__ = table_name("attachment")

    id = Column(Integer, primary_key=True)
    segment_id = Column("segmentId", Integer, ForeignKey(_ref("segment"), ondelete="CASCADE"), nullable=False)
    file_name = Column("fileName", Text, nullable=False)
    file_key = Column("fileKey", Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    segment = relationship("Segment", back_populates="attachments")


# ---------------------------
# DISCUSSION
# ---------------------------
class Comment(Base):
    __tablename__ = table_name("comment")

    id = Column(Integer, primary_key=True)
    user_id = Column("userId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), nullable=False)
    segment_id = Column("segmentId", Integer, ForeignKey(_ref("segment"), ondelete="CASCADE"), nullable=False)
    parent_id = Column("parentId", Integer, ForeignKey(_ref("comment"), ondelete="CASCADE"), nullable=True)
    # FK targets the user row; the relation below resolves it through Profile.user_id
    replied_to_id = Column("repliedToId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), nullable=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="comments", foreign_keys=[user_id])
    segment = relationship("Segment", back_populates="comments")

    # thread edges
    parent = relationship("Comment", back_populates="children", remote_side=[id])
    children = relationship(
        "Comment",
        back_populates="parent",
        order_by="Comment.id",
        cascade="all",
        passive_deletes=True,
    )

    # author/addressee profiles, joined on Profile.user_id
    profile = relationship(
        "Profile",
        primaryjoin="foreign(Comment.user_id) == Profile.user_id",
        uselist=False,
        viewonly=True,
    )
    replied_to_profile = relationship(
        "Profile",
        primaryjoin="foreign(Comment.replied_to_id) == Profile.user_id",
        uselist=False,
        viewonly=True,
    )


# ---------------------------
# LEARNER ACTIVITY
# ---------------------------
class Progress(Base):
    __tablename__ = table_name("progress")

    id = Column(Integer, primary_key=True)
    user_id = Column("userId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), nullable=False)
    segment_id = Column("segmentId", Integer, ForeignKey(_ref("segment"), ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="progress")
    segment = relationship("Segment", back_populates="progress")

    # at most one completion per (user, segment)
    __table_args__ = (
        Index("progress_user_segment_unique_idx", "userId", "segmentId", unique=True),
    )


class Testimonial(Base):
    __tablename__ = table_name("testimonial")

    id = Column(Integer, primary_key=True)
    user_id = Column("userId", Integer, ForeignKey(_ref("user"), ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    emojis = Column(Text, nullable=False)
    display_name = Column("displayName", Text, nullable=False)
    permission_granted = Column(
        "permissionGranted", Boolean, nullable=False, default=False, server_default=sa.false()
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="testimonials")
    profile = relationship(
        "Profile",
        primaryjoin="foreign(Testimonial.user_id) == Profile.user_id",
        uselist=False,
        viewonly=True,
    )
