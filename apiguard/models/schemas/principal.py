from pydantic import BaseModel, Field


class PrincipalOut(BaseModel):
    """The authenticated caller, as seen by the API."""
    username: str
    roles: list[str] = Field(default_factory=list, description="Sorted role names")
    provider_key: str
