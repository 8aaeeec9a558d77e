"""
Backend — API Routes Package
==============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory (under API_V1_STR, /api/v1, unless noted):
    - login.py:    /login/access-token, /login/test-token,
                   /password-recovery/{email}, /reset-password/,
                   /password-recovery-html-content/{email}
    - users.py:    /users/...
    - items.py:    /items/...
    - utils.py:    /utils/test-email/, /utils/health-check/, /utils/services/
    - private.py:  /private/users/ (ENVIRONMENT=local only)
    - health.py:   /health (root, not versioned)
    - deps.py:     authentication dependencies shared by the routers

Routes stay THIN: extract request data, call a service, shape the response.
"""
