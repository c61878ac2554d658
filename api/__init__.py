"""
API Module - FastAPI application and routes.
"""
