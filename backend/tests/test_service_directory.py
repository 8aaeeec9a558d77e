"""
Backend — Service Directory Unit Tests
========================================

What:  URL layout of the stack for port mode (DOMAIN=localhost) and domain
       mode (subdomains behind the reverse proxy).
How:   build_service_directory() is a pure function of Settings.

What we test:
    ✅ Port mode matches the documented local URL table exactly
    ✅ Custom ports flow into port-mode URLs
    ✅ Domain mode: api./dashboard. subdomains, http locally, https deployed
    ✅ Mail catcher absent outside local
    ✅ DOMAIN normalization (case, whitespace, trailing dot)
"""

import pytest

from app.config import Settings
from app.services.service_directory import (
    DOMAIN_MODE,
    PORT_MODE,
    SERVICE_KEYS,
    build_service_directory,
)

LOCAL_URL_TABLE = {
    "frontend": "http://localhost:5173",
    "backend": "http://localhost:8000",
    "docs": "http://localhost:8000/docs",
    "redoc": "http://localhost:8000/redoc",
    "adminer": "http://localhost:8080",
    "proxy_dashboard": "http://localhost:8090",
    "mailcatcher": "http://localhost:1080",
}


def make_settings(**overrides) -> Settings:
    values = {
        "secret_key": "a-real-secret",
        "postgres_password": "a-real-db-password",
        "first_superuser_password": "a-real-admin-password",
        "environment": "local",
        "domain": "localhost",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def urls_of(directory):
    return {key: directory.url(key) for key in SERVICE_KEYS}


class TestPortMode:

    def test_default_local_url_table(self):
        directory = build_service_directory(make_settings())
        assert directory.mode == PORT_MODE
        assert urls_of(directory) == LOCAL_URL_TABLE

    def test_custom_ports(self):
        directory = build_service_directory(
            make_settings(frontend_port=3000, backend_port=9000, adminer_port=8081)
        )
        assert directory.url("frontend") == "http://localhost:3000"
        assert directory.url("docs") == "http://localhost:9000/docs"
        assert directory.url("adminer") == "http://localhost:8081"

    def test_localhost_is_port_mode_in_any_environment(self):
        directory = build_service_directory(make_settings(environment="staging"))
        assert directory.mode == PORT_MODE

    def test_ordered_follows_service_keys(self):
        directory = build_service_directory(make_settings())
        assert [s.key for s in directory.ordered()] == list(SERVICE_KEYS)
        assert directory.ordered()[0].label == "Frontend"


class TestDomainMode:

    def test_local_environment_uses_http_subdomains(self):
        directory = build_service_directory(make_settings(domain="localhost.tiangolo.com"))
        assert directory.mode == DOMAIN_MODE
        assert urls_of(directory) == {
            "frontend": "http://dashboard.localhost.tiangolo.com",
            "backend": "http://api.localhost.tiangolo.com",
            "docs": "http://api.localhost.tiangolo.com/docs",
            "redoc": "http://api.localhost.tiangolo.com/redoc",
            "adminer": "http://localhost.tiangolo.com:8080",
            "proxy_dashboard": "http://localhost.tiangolo.com:8090",
            "mailcatcher": "http://localhost.tiangolo.com:1080",
        }

    @pytest.mark.parametrize("environment", ["staging", "production"])
    def test_deployed_environment_uses_https(self, environment):
        directory = build_service_directory(
            make_settings(domain="example.com", environment=environment)
        )
        assert urls_of(directory) == {
            "frontend": "https://dashboard.example.com",
            "backend": "https://api.example.com",
            "docs": "https://api.example.com/docs",
            "redoc": "https://api.example.com/redoc",
            "adminer": "https://adminer.example.com",
            "proxy_dashboard": "https://traefik.example.com",
            "mailcatcher": None,
        }

    def test_environment_is_reported(self):
        directory = build_service_directory(
            make_settings(domain="example.com", environment="production")
        )
        assert directory.environment == "production"
        assert directory.domain == "example.com"


class TestDomainNormalization:

    @pytest.mark.parametrize("raw", ["Localhost", " localhost ", "localhost."])
    def test_localhost_variants_select_port_mode(self, raw):
        directory = build_service_directory(make_settings(domain=raw))
        assert directory.mode == PORT_MODE
        assert directory.domain == "localhost"

    def test_domain_is_lowercased(self):
        directory = build_service_directory(make_settings(domain="Example.COM"))
        assert directory.url("backend") == "http://api.example.com"
