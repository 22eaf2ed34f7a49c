"""
FastAPI Application Package

Entry point of the backend API: exposes the RSI monitor over HTTP.
"""
