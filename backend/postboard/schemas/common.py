"""
Postboard Backend — Shared Schemas
====================================

What:  The camelCase base model plus the response shapes shared by every
       router (errors, plain messages, health).
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Base for every model that crosses the API boundary as output.

    alias_generator:  snake_case attributes ↔ camelCase JSON keys
    populate_by_name: services and tests build records with snake_case names
    from_attributes:  records are validated straight from ORM objects
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(APIModel):
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(APIModel):
    """
    What:  Standardized error body for all API errors.

    Example:
        {
            "status": 403,
            "error": "forbidden",
            "message": "You are not allowed to modify this post",
            "details": {"resource": "post", "resource_id": 7},
            "requestId": "a1b2c3d4"
        }
    """
    status: int = Field(description="HTTP status code")
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(APIModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
