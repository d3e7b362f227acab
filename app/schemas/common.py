"""Common/shared schemas for the response envelope."""
from datetime import datetime
from typing import Annotated, Any, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.utils.helpers import as_utc

# Stored timestamps are naive UTC; on the wire they carry the offset
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    """Wire keys are camelCase; snake_case names are accepted on input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessResponse(BaseModel):
    success: bool = True
    message: str
    data: Optional[Any] = None


class FieldError(BaseModel):
    field: str
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    data: Optional[Any] = None
    errors: Optional[List[FieldError]] = None
    error: Optional[str] = None
