# Middleware package init
"""
Petly Backend: Middleware Package
===================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request id is assigned first so the access log line carries it;
    the logging middleware sees the final status and duration on the way out.
"""
