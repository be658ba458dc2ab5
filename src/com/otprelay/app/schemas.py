from pydantic import BaseModel
from typing import Any, List

class SubmitOtpRequest(BaseModel):
    # left untyped so a non-string phone is reported as an invalid phone
    phone: Any = None
    message: Any = None

class SubmitOtpResponse(BaseModel):
    status: str = "stored"

class OtpMessageOut(BaseModel):
    otp: str

class RetrieveOtpResponse(BaseModel):
    ok: bool
    count: int
    messages: List[OtpMessageOut]
    checkedAt: str

class HealthResponse(BaseModel):
    status: str

class ErrorResponse(BaseModel):
    error: str
