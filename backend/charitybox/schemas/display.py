from typing import Any

from pydantic import BaseModel


class DisplayMessageUpdate(BaseModel):
    # type checks happen in the store so the error matches the other endpoints
    line1: Any = ""
    line2: Any = ""


class DisplayMessage(BaseModel):
    line1: str
    line2: str
