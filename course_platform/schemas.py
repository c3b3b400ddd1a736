from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

# Read = a row as it comes back from storage (every column).
# Create = what it takes to insert one: generated keys, defaulted and
# nullable columns are optional. Dump with exclude_unset=True so the
# column defaults apply to anything left out.


# =========================
# USER / IDENTITY SCHEMAS (read-only here)
# =========================
class UserRead(BaseModel):
    id: int
    email: Optional[str] = None
    email_verified: Optional[datetime] = None
    is_premium: bool = False
    is_admin: bool = False

    class Config:
        from_attributes = True


class ProfileRead(BaseModel):
    id: int
    user_id: int
    display_name: Optional[str] = None
    image_id: Optional[str] = None
    image: Optional[str] = None
    bio: str = ""

    class Config:
        from_attributes = True


class SessionRead(BaseModel):
    id: str
    user_id: int
    expires_at: datetime

    class Config:
        from_attributes = True


# =========================
# MODULE SCHEMAS
# =========================
class ModuleBase(BaseModel):
    title: str
    order: int

class ModuleRead(ModuleBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class ModuleCreate(ModuleBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================
# SEGMENT SCHEMAS
# =========================
class SegmentBase(BaseModel):
    slug: str
    title: str
    content: Optional[str] = None
    order: int
    length: Optional[str] = None
    is_premium: bool = False
    module_id: int
    video_key: Optional[str] = None

class SegmentRead(SegmentBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class SegmentCreate(SegmentBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================
# ATTACHMENT SCHEMAS
# =========================
class AttachmentBase(BaseModel):
    segment_id: int
    file_name: str
    file_key: str

class AttachmentRead(AttachmentBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True

class AttachmentCreate(AttachmentBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None


# =========================
# PROGRESS SCHEMAS
# =========================
class ProgressBase(BaseModel):
    user_id: int
    segment_id: int

class ProgressRead(ProgressBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True

class ProgressCreate(ProgressBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None


# =========================
# TESTIMONIAL SCHEMAS
# =========================
class TestimonialBase(BaseModel):
    user_id: int
    content: str
    emojis: str
    display_name: str
    permission_granted: bool = False

class TestimonialRead(TestimonialBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class TestimonialCreate(TestimonialBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =========================
# COMMENT SCHEMAS
# =========================
class CommentBase(BaseModel):
    user_id: int
    segment_id: int
    parent_id: Optional[int] = None
    replied_to_id: Optional[int] = None
    content: str

class CommentRead(CommentBase):
    id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CommentCreate(CommentBase):
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Eager-load shapes (follow the relations on the models) ---
class ModuleWithSegmentsRead(ModuleRead):
    segments: List[SegmentRead] = []

class SegmentWithAttachmentsRead(SegmentRead):
    attachments: List[AttachmentRead] = []

class TestimonialWithProfileRead(TestimonialRead):
    profile: Optional[ProfileRead] = None

class CommentWithProfileRead(CommentRead):
    profile: Optional[ProfileRead] = None
    replied_to_profile: Optional[ProfileRead] = None
    children: List["CommentWithProfileRead"] = []


CommentWithProfileRead.model_rebuild()
