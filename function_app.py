"""
Azure Functions entry point.

Serves the FastAPI app through the Functions ASGI bridge. Every route
requires a function key.
"""
import azure.functions as func

from imageflip.main import app as fastapi_app

app = func.AsgiFunctionApp(app=fastapi_app, http_auth_level=func.AuthLevel.FUNCTION)
