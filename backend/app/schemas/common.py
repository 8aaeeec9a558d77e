"""
Backend — Shared Response Schemas
===================================

What:  Generic response models shared by several routers: plain messages,
       the error envelope, health and the service directory.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.
    Why:   Clients need a consistent structure to parse errors programmatically.

    Example:
        {
            "error": "conflict",
            "message": "The user with this email already exists in the system",
            "details": {"email": "alice@example.com"},
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment stage: local, staging, production")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")


class ServiceURLPublic(BaseModel):
    label: str = Field(description="Human-readable service name")
    url: Optional[str] = Field(description="Where the service is reachable; null if not deployed")


class ServiceDirectoryPublic(BaseModel):
    mode: str = Field(description="'ports' for DOMAIN=localhost, otherwise 'domain'")
    domain: str
    environment: str
    services: Dict[str, ServiceURLPublic]
    order: List[str] = Field(description="Service keys in display order")
