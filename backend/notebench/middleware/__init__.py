"""
Notebench Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any work
    2. Request ID: correlation id for logs and the X-Request-ID header
    3. Access Log: method, path, status, duration, caller
"""
