import uvicorn

from settings.config import load_settings_from_env

if __name__ == "__main__":
    settings = load_settings_from_env()
    uvicorn.run(
        "settings.server:kinerja_app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug and not settings.is_production
    )
