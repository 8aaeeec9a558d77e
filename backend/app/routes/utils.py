"""
Backend — Utility Routes
==========================

What:  Test email, liveness probe, and the service URL directory.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import EmailStr

from app.config import settings
from app.routes.deps import get_current_active_superuser
from app.schemas.common import ErrorResponse, Message, ServiceDirectoryPublic, ServiceURLPublic
from app.services import email_service
from app.services.service_directory import SERVICE_KEYS, build_service_directory

router = APIRouter(prefix="/utils", tags=["utils"])


@router.post(
    "/test-email/",
    dependencies=[Depends(get_current_active_superuser)],
    status_code=201,
    response_model=Message,
    responses={503: {"description": "SMTP not configured or unreachable", "model": ErrorResponse}},
    summary="Send a test email",
)
async def test_email(email_to: EmailStr = Query(...)) -> Message:
    """Locally the message lands in the mail catcher UI."""
    email_data = email_service.generate_test_email(email_to=email_to)
    await email_service.send_email(
        email_to=email_to,
        subject=email_data.subject,
        html_content=email_data.html_content,
    )
    return Message(message="Test email sent")


@router.get("/health-check/", summary="Liveness probe")
async def health_check() -> bool:
    # Used by the compose healthcheck; /health reports dependency status
    return True


@router.get("/services/", response_model=ServiceDirectoryPublic, summary="Service URL directory")
async def read_services() -> ServiceDirectoryPublic:
    """
    Where each service of the stack is reachable, as configured by DOMAIN and
    ENVIRONMENT (port URLs on localhost, subdomains behind the reverse proxy).
    """
    directory = build_service_directory(settings)
    return ServiceDirectoryPublic(
        mode=directory.mode,
        domain=directory.domain,
        environment=directory.environment,
        services={
            s.key: ServiceURLPublic(label=s.label, url=s.url) for s in directory.ordered()
        },
        order=list(SERVICE_KEYS),
    )
