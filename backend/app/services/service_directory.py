"""
Backend — Service Directory
=============================

What:  Computes where every developer-facing service of the stack is reachable.
Why:   The stack (frontend, backend, docs, DB admin UI, reverse-proxy dashboard,
       mail catcher) is reached either by port on localhost or by subdomain
       through the reverse proxy. The backend reports the URLs it expects so
       the startup log and GET /api/v1/utils/services/ agree with the setup guide.
How:   Pure function of settings (DOMAIN, ENVIRONMENT, *_PORT).

Port mode (DOMAIN=localhost):
    frontend          http://localhost:5173
    backend           http://localhost:8000
    docs / redoc      http://localhost:8000/docs, /redoc
    adminer           http://localhost:8080
    proxy_dashboard   http://localhost:8090
    mailcatcher       http://localhost:1080

Domain mode (any other DOMAIN):
    frontend          <scheme>://dashboard.DOMAIN
    backend           <scheme>://api.DOMAIN  (+ /docs, /redoc)
    local env:        adminer, proxy dashboard and mail catcher stay on
                      DOMAIN:8080 / :8090 / :1080 over http
    staging/prod:     https://adminer.DOMAIN, https://traefik.DOMAIN,
                      no mail catcher
    scheme is http for ENVIRONMENT=local, https otherwise.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from app.config import Settings

PORT_MODE = "ports"
DOMAIN_MODE = "domain"

# Display order; also the stable set of keys
SERVICE_KEYS = (
    "frontend",
    "backend",
    "docs",
    "redoc",
    "adminer",
    "proxy_dashboard",
    "mailcatcher",
)

SERVICE_LABELS = {
    "frontend": "Frontend",
    "backend": "Backend API",
    "docs": "Interactive API docs",
    "redoc": "Alternative API docs",
    "adminer": "DB admin UI",
    "proxy_dashboard": "Reverse-proxy dashboard",
    "mailcatcher": "Mail capture UI",
}


@dataclass(frozen=True)
class ServiceURL:
    key: str
    label: str
    url: Optional[str]


@dataclass
class ServiceDirectory:
    mode: str
    domain: str
    environment: str
    services: Dict[str, ServiceURL] = field(default_factory=dict)

    def url(self, key: str) -> Optional[str]:
        return self.services[key].url

    def ordered(self) -> List[ServiceURL]:
        return [self.services[key] for key in SERVICE_KEYS]


def _port_urls(settings: Settings) -> Dict[str, Optional[str]]:
    backend = f"http://localhost:{settings.backend_port}"
    return {
        "frontend": f"http://localhost:{settings.frontend_port}",
        "backend": backend,
        "docs": f"{backend}/docs",
        "redoc": f"{backend}/redoc",
        "adminer": f"http://localhost:{settings.adminer_port}",
        "proxy_dashboard": f"http://localhost:{settings.proxy_dashboard_port}",
        "mailcatcher": f"http://localhost:{settings.mailcatcher_port}",
    }


def _domain_urls(settings: Settings, domain: str) -> Dict[str, Optional[str]]:
    local = settings.environment == "local"
    scheme = "http" if local else "https"
    backend = f"{scheme}://api.{domain}"
    urls: Dict[str, Optional[str]] = {
        "frontend": f"{scheme}://dashboard.{domain}",
        "backend": backend,
        "docs": f"{backend}/docs",
        "redoc": f"{backend}/redoc",
    }
    if local:
        urls["adminer"] = f"http://{domain}:{settings.adminer_port}"
        urls["proxy_dashboard"] = f"http://{domain}:{settings.proxy_dashboard_port}"
        urls["mailcatcher"] = f"http://{domain}:{settings.mailcatcher_port}"
    else:
        urls["adminer"] = f"https://adminer.{domain}"
        urls["proxy_dashboard"] = f"https://traefik.{domain}"
        urls["mailcatcher"] = None  # mail catcher only runs in local stacks
    return urls


def build_service_directory(settings: Settings) -> ServiceDirectory:
    """
    Build the URL directory for the given settings.

    DOMAIN is normalized (whitespace, trailing dot and case ignored), so
    "Localhost" and "localhost." both select port mode.
    """
    domain = settings.domain.strip().rstrip(".").lower()
    if domain == "localhost":
        mode = PORT_MODE
        urls = _port_urls(settings)
    else:
        mode = DOMAIN_MODE
        urls = _domain_urls(settings, domain)

    services = {
        key: ServiceURL(key=key, label=SERVICE_LABELS[key], url=urls[key])
        for key in SERVICE_KEYS
    }
    return ServiceDirectory(
        mode=mode,
        domain=domain,
        environment=settings.environment,
        services=services,
    )
