from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from fastapi.middleware.gzip import GZipMiddleware
from datetime import datetime
import logging
from api.import_apis import import_router
from settings.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

description = """
#### Kinerja APIs:
   Roster and performance imports with organisational level resolution.
"""

kinerja_app = FastAPI(
    title="Kinerja",
    description=description,
    version="1.0.0",
    openapi_version="3.1.0",
    docs_url="/docs/kinerja",
)


@kinerja_app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "failure",
            "data": None,
            "errors": [exc.detail]
        }
    )

kinerja_app.add_middleware(GZipMiddleware, minimum_size=1000)

kinerja_app.include_router(import_router)

@kinerja_app.get('/')
def read_root():
    """
    Root endpoint to check if the Kinerja API is running.
    """
    return {"message": "Kinerja API is running successfully!"}

@kinerja_app.get('/health')
def health_check():
    """
    Lightweight health check endpoint.
    """
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}
