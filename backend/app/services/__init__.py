"""
Backend — Services Layer
==========================

Service Inventory:
    - UserService:       accounts, authentication, deletion with owned items
    - ItemService:       item CRUD with ownership checks
    - email_service:     Jinja2 email rendering + SMTP delivery (aiosmtplib)
    - service_directory: URLs of every service in the stack (ports vs. subdomains)

Services receive the AsyncSession per call and never commit; the request's
session dependency owns the transaction.
"""
