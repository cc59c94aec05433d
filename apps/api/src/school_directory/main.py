"""
School Directory API - Main Application Entry Point

Run with:
    uvicorn school_directory.main:app
"""

from school_directory.app_factory import create_app

app = create_app()
