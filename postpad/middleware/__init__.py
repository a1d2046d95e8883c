# Middleware package init
"""
Postpad — Middleware Package
==============================

Middleware Chain:
    Request → [Request ID] → [Logging] → Route Handler

    The request ID is set first so the access log line and every log entry
    written while handling the request carry it.

The session gate is not middleware: it is the `require_identity` dependency
in postpad.auth.gate, applied only to the routes that need it.
"""
