"""
WSGI Adapter for shared hosting deployment (e.g. PythonAnywhere).
Converts the FastAPI ASGI application to a WSGI application using a2wsgi.
"""
from a2wsgi import ASGIMiddleware  # type: ignore
from app.main import app

# Entry point looked up by WSGI servers
application = ASGIMiddleware(app)  # type: ignore
