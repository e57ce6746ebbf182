from pydantic import BaseModel
from typing import Any, Mapping, Optional

class TestProject(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "TestProject":
        """Build a record from a dict_row result with the "Id"/"Name" columns"""
        return cls(id=row["Id"], name=row["Name"])

class TestProjectInput(BaseModel):
    """Request body for create and update. Missing or malformed bodies are treated as {}."""
    name: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    error: str
