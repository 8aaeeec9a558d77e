"""
Backend — Middleware Package
==============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID FIRST: every later log line can carry the correlation ID
    2. Logging: method, path, status and duration, tagged with the request ID
    3. CORS: FastAPI's CORSMiddleware (answers browser preflights from the
       frontend dev server on :5173 or dashboard.DOMAIN)
"""
