from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

OCR_SPACE_DEMO_KEY = "helloworld"


class Settings(BaseSettings):
    """application settings with environment variables support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # server
    host: str = Field(default="0.0.0.0", description="host to bind")
    port: int = Field(default=8000, ge=1, le=65535, description="port to bind")
    workers: int = Field(default=4, ge=1, description="number of thread pool workers")

    # cors
    allowed_origins: str = Field(default="*", description="comma separated allowed origins")

    # recognition
    recognition_provider: str = Field(
        default="ocrspace", description="text recognition provider: ocrspace or vision"
    )
    ocr_space_api_key: str = Field(
        default="", description="ocr.space api key (demo key is used when empty)"
    )
    ocr_space_api_url: str = Field(
        default="https://api.ocr.space/parse/image", description="ocr.space parse endpoint"
    )
    ocr_space_language: str = Field(default="eng", description="ocr.space language code")
    ocr_space_engine: int = Field(default=2, ge=1, le=3, description="ocr.space engine number")
    google_vision_api_key: str = Field(default="", description="google cloud vision api key")
    google_vision_api_url: str = Field(
        default="https://vision.googleapis.com/v1/images:annotate",
        description="google vision annotate endpoint",
    )
    max_image_size: int | None = Field(
        default=None, ge=1, description="max decoded image size in bytes (no limit if None)"
    )
    binarize_threshold: int = Field(
        default=200, ge=1, le=255, description="grey level below which pixels become black"
    )
    no_text_hint: str | None = Field(
        default=None, description="hint returned alongside an empty recognition result"
    )

    # grading
    ssl_labs_api_url: str = Field(
        default="https://api.ssllabs.com/api/v3/analyze", description="ssl labs analyze endpoint"
    )

    # contact
    emailjs_api_url: str = Field(
        default="https://api.emailjs.com/api/v1.0/email/send", description="emailjs send endpoint"
    )
    emailjs_service_id: str = Field(default="", description="emailjs service id")
    emailjs_template_id: str = Field(default="", description="emailjs template id")
    emailjs_public_key: str = Field(default="", description="emailjs public key (user id)")
    emailjs_private_key: str = Field(default="", description="emailjs private key (access token)")

    # upstream
    upstream_timeout: float = Field(
        default=30.0, gt=0, description="timeout for calls to external services in seconds"
    )

    # logging
    log_level: str = Field(default="INFO", description="logging level")
    log_format: str = Field(default="json", description="log format: json or console")

    # telemetry
    enable_telemetry: bool = Field(default=False, description="enable opentelemetry")
    otlp_endpoint: str = Field(default="http://localhost:4317", description="otlp grpc endpoint")
    service_name: str = Field(default="portfolio-proxy", description="service name for traces")

    # metrics
    enable_metrics: bool = Field(default=True, description="enable prometheus metrics")

    @property
    def allowed_origins_list(self) -> list[str]:
        """parse allowed origins as list"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def ocr_space_effective_key(self) -> str:
        """configured ocr.space key or the public demo key"""
        return self.ocr_space_api_key or OCR_SPACE_DEMO_KEY


settings = Settings()
