from pydantic import BaseModel, ConfigDict, Field


class CallSite(BaseModel):
    """Represents one invocation encountered while scanning a file."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Canonical call name (receiver.method or callee text)")
    file_name: str = Field(..., description="Display name of the file containing the call")
    file_path: str = Field(..., description="Full path of the file containing the call")
    line_number: int = Field(..., ge=1, description="Line number where the call occurs")
