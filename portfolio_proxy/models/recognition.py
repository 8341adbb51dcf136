from pydantic import BaseModel, ConfigDict, Field


class RecognitionRequest(BaseModel):
    """base64 image drawn on the canvas"""

    image: str | None = Field(
        default=None, description="base64 encoded image, optionally as a data url"
    )
    preprocess: bool = Field(
        default=False, description="convert the image to black and white before recognition"
    )

    model_config = ConfigDict(
        json_schema_extra={"example": {"image": "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJ"}}
    )


class RecognitionResult(BaseModel):
    """recognized text with line breaks collapsed"""

    text: str = Field(description="recognized text, newlines replaced by spaces and trimmed")
    error: str | None = Field(default=None, description="hint when no text was found")

    model_config = ConfigDict(json_schema_extra={"example": {"text": "HELLO WORLD"}})
