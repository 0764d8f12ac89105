# Middleware package init
"""
Users API — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request ID is assigned before the logging middleware runs, so every
    access log line and every log line emitted while handling the request
    can carry the same correlation ID.
"""
