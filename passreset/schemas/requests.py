from pydantic import BaseModel, Field


class PasscodeActionIn(BaseModel):
    """
    Loose on purpose: presence and email syntax are checked by the dispatcher,
    which answers 400 rather than the framework's 422.
    """

    action: str | None = Field(None, description="request | verify", max_length=32)
    email: str | None = Field(None, description="Identity the passcode belongs to")
    code: str | int | None = Field(None, description="Passcode to verify")
