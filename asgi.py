"""
ASGI entry point.

Run with:
    uvicorn asgi:app --port 3002
or through main.py, which reads HOST/PORT from the environment.
"""

from app import create_app

app = create_app()
