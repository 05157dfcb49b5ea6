from typing import Literal

from pydantic import BaseModel, Field


class ErrorOut(BaseModel):
    detail: str = Field(..., description="Why the action was rejected")


class HealthOut(BaseModel):
    status: Literal["ok"] = "ok"
