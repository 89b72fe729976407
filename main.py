import uvicorn

from app import create_app
from config import AppSettings


def main() -> None:
    settings = AppSettings()
    app = create_app(settings)
    # logging is configured by create_app(); keep uvicorn from replacing it
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
