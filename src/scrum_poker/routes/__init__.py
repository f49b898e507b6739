"""
HTTP API routes.
"""
