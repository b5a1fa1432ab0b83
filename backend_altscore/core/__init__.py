"""
Core utilities: domain exceptions and cross-cutting concerns shared by the
scoring engine, analytics, API server, and tools.
"""
