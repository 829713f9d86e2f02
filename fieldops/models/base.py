"""Shared configuration for API models."""
from pydantic import BaseModel, ConfigDict

from fieldops.sync.case import to_camel


class ApplicationModel(BaseModel):
    """Model whose JSON form uses application (camel-case) field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
