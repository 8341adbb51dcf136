from pydantic import BaseModel, Field, field_validator


class ContactMessage(BaseModel):
    """message submitted through the contact form"""

    name: str = Field(max_length=200, description="sender name")
    email: str = Field(max_length=320, description="sender email address")
    message: str = Field(max_length=10000, description="message body")
    subject: str | None = Field(default=None, max_length=300, description="optional subject")

    @field_validator("name", "message")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        local, _, domain = v.partition("@")
        if not local or not domain or " " in v:
            raise ValueError("must be a valid email address")
        return v

    def template_params(self) -> dict[str, str]:
        """values for the emailjs template"""
        return {
            "from_name": self.name,
            "from_email": self.email,
            "reply_to": self.email,
            "subject": self.subject or f"Portfolio contact from {self.name}",
            "message": self.message,
        }


class ContactResult(BaseModel):
    success: bool = True
