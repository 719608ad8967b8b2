import uuid
from sqlalchemy.sql import func
from sqlalchemy import Column, DateTime, String


def new_id() -> str:
    return str(uuid.uuid4())


class UUIDPrimaryKeyMixin:
    id = Column(String(36), primary_key=True, default=new_id)
class CreatedAtMixin:
    created_at = Column(DateTime, default=func.now())
class UpdatedAtMixin:
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
