"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from typing import Any

from pydantic import BaseModel, Field


# =============================================================================
# View Schemas
# =============================================================================


class CompileResponse(BaseModel):
    """Response from compiling a single view."""

    logical_name: str = Field(description="Logical name of the compiled view")
    content_fingerprint: str = Field(description="Fingerprint of the template source")
    dependencies: list[str] = Field(
        default_factory=list, description="Views included by this view"
    )


# =============================================================================
# Anti-Forgery Schemas
# =============================================================================


class TokenRedeemRequest(BaseModel):
    """Request to redeem an anti-forgery token submitted with a form."""

    token: str = Field(min_length=1, description="Token issued in a rendered page")


class TokenRedeemResponse(BaseModel):
    """Outcome of a token redemption."""

    redeemed: bool = Field(description="True if the token was issued and not used before")


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
