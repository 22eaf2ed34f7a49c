"""
Core Package

Exchange-agnostic building blocks shared by the services and the API:
- config: Pydantic settings loaded from the environment
- logging: Application-wide logger setup
- errors: Exception taxonomy
- schemas: Pydantic models for candles and RSI results
"""
