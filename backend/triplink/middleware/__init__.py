# Middleware package init
"""
TripLink Backend — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    - Rate Limit rejects over-quota clients before anything else runs
    - Request ID sets the correlation id the access log and error bodies read
    - Access Log records method, path, status and duration on the way out
"""
