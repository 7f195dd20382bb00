from .core.logging import configure_logging
from .settings import settings
from . import create_app

configure_logging(settings.LOG_LEVEL)
app = create_app(settings)


def run() -> None:
    import uvicorn

    uvicorn.run("device_manager.main:app", host=settings.HOST, port=settings.PORT)
