"""
Request bodies for the API.

`query` is declared as a strict optional string so a missing query reaches
the route (which answers with a friendly 400) while a non-string query
fails validation.
"""
from typing import Optional

from pydantic import BaseModel, Field, StrictStr


class IntelRequest(BaseModel):
    query: Optional[StrictStr] = None
    audience: Optional[str] = None


class ChatSimpleRequest(BaseModel):
    query: Optional[StrictStr] = None


class BriefingsGenerateRequest(BaseModel):
    audience: Optional[str] = None
    limit: Optional[int] = Field(default=None, ge=1, le=20)
