# Middleware package init
"""
Happy Thoughts Backend — Middleware Package
============================================

Middleware Chain (outermost first):
    Request → [CORS] → [Request ID] → [Logging] → [GZip] → Route Handler

    CORS wraps everything so even 500 responses carry its headers. Request ID
    runs before Logging so the access log line carries it, and it converts
    unexpected exceptions into the 500 body. The response passes back through
    the same chain in reverse.
"""
