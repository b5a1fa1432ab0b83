"""
API server package: thin HTTP/REST adapter over the assessment pipeline.

Validates transport-level shape, delegates to backend_altscore.analytics, and
maps domain errors to status codes. Holds no scoring logic of its own.
"""
