"""
Clientes API — Middleware Package
===================================

Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first so every later log line can include it
    - Logging captures the final status and duration on the way out
    - CORS answers preflight requests from the front-end origins
"""
