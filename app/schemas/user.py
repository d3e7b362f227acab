"""User response schemas. None of them carry secret material."""
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional
from app.schemas.common import CamelModel, UTCDateTime


class PublicUserProfile(CamelModel):
    id: int
    name: str
    username: str
    image_url: Optional[str] = None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

class UserProfile(PublicUserProfile):
    email: str
    additional_info: Dict[str, Any] = {}
    is_active: bool
    last_login_at: Optional[UTCDateTime] = None
    updated_at: UTCDateTime
