from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema whose JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UploadedFile(CamelModel):
    """Metadata recorded for a freshly uploaded object."""

    file_name: str
    original_name: str
    url: str
    size: int
    content_type: str
    uploaded_at: datetime


class StoredFile(CamelModel):
    """An object listed from the storage bucket."""

    name: str
    size: int
    content_type: Optional[str] = None
    created_on: Optional[datetime] = None
    url: str
