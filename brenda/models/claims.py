"""Claims carried by a signed voice session token."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionClaims(BaseModel):
    """
    Claims payload of a session token.

    On the wire the compact JWT names are used (``uid``, ``iat``, ``exp``);
    in Python the descriptive field names are available as well.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    user_id: str = Field(..., alias="uid")
    issued_at: Optional[int] = Field(None, alias="iat")
    expires_at: Optional[int] = Field(None, alias="exp")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
