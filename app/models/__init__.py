"""
API Models - Pydantic request/response schemas
"""
