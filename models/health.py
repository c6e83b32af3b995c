from typing import Optional

from pydantic import BaseModel, Field


class Health(BaseModel):
    status: int = Field(..., examples=[200])
    status_message: str = Field(..., examples=["OK"])
    timestamp: str = Field(..., description="UTC time of the check, ISO 8601")
    ip_address: str
    echo: Optional[str] = Field(None, description="Echo of the 'echo' query parameter")
    path_echo: Optional[str] = Field(None, description="Echo of the path segment, when given")
