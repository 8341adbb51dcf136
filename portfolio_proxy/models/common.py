from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """body of every non-2xx response"""

    error: str = Field(description="human readable error message")


class HealthResponse(BaseModel):
    status: str = Field(description="service status")
    service: str = Field(description="service name")
    version: str = Field(description="application version")
    recognition_provider: str = Field(description="configured text recognition provider")
