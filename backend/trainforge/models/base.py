"""
Strict Base Models for API Request/Response Validation

Base classes that harden the contract between the editor frontend and the
backend.

Usage:
    # For request bodies (strictest validation)
    class CommitModuleRequest(StrictRequest):
        module: ModuleFields
        file_info: FileInfo

    # For response bodies (allows extra attributes from ORM rows)
    class ModuleRecord(StrictResponse):
        id: int
        title: str

Architecture:
    API Request → StrictRequest (extra="forbid") → Route Handler
    DB Model → StrictResponse (extra="ignore") → API Response
"""

from pydantic import BaseModel, ConfigDict


class StrictRequest(BaseModel):
    """
    Base model for API request bodies with strict validation.

    Features:
        - extra="forbid": Unknown fields raise 422 Unprocessable Entity
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )


class StrictResponse(BaseModel):
    """
    Base model for API response bodies.

    Features:
        - extra="ignore": Silently ignores extra fields (DB may have more columns)
        - from_attributes=True: Allows ORM model conversion
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )
