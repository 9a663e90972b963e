"""
Serving — FastAPI application exposing document ingestion over HTTP.
"""
