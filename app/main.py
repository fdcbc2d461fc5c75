import uvicorn

from app.api.app import create_app
from app.config.settings import Settings
from app.logging.logger import Log
from app.processor.container import build_container


def main() -> None:
    """Entry point: settings -> logging -> dependencies -> HTTP server."""
    settings = Settings()
    Log.configure(settings.log_level)
    container = build_container(settings)
    Log.info(
        f"Loaded {len(container.catalog)} services, provider {settings.generation_provider}"
    )
    uvicorn.run(create_app(container), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
