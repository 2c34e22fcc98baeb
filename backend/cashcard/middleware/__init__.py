"""
Cash Card Service - Middleware Package
========================================

Middleware Chain:
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first so every later log line and error body can carry it
    - Rate Limit rejects over-budget clients before any database work
    - Logging records status and duration of the handled request
"""
