"""
Postboard Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for logs, error bodies and the response header
    2. Logging: one access line per request, tagged with that id

    Responses travel the chain in reverse, so the access log sees the final
    status code and the X-Request-ID header is added last.
"""
