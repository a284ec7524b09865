from typing import Any

from pydantic import BaseModel, Field


class ErrorEnvelope(BaseModel):
    """JSON body returned for every handled error."""
    message: str
    code: int = Field(..., description="HTTP status code of the response")
    kind: str = Field(..., description="Error tag, e.g. missing_credentials, unknown_api_key")
    errors: list[Any] | None = Field(default=None, description="Validation errors, 422 only")

    # Debug-only diagnostics; omitted from the body outside debug mode.
    exception: str | None = None
    file: str | None = None
    line: int | None = None
    trace: list[str] | None = None
