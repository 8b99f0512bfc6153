"""
Application package.

``main`` assembles the FastAPI application; ``core`` holds settings,
logging, fault types and the storage gateway; ``services`` implements
member operations; ``api`` exposes them over HTTP.
"""
