# Middleware package init
"""
Animal Rescue API — Middleware Package
=======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation id stored in a ContextVar, echoed as X-Request-ID
    2. Logging: one access line per request, tagged with the request id
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses travel back through the same chain in reverse.
"""
