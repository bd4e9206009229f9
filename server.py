import os

import uvicorn

from app.Core.config import get_settings


def main() -> None:
    settings = get_settings()
    port = int(os.environ.get("PORT", 8000))
    dev = settings.environment == "dev"
    host = os.environ.get("HOST") or ("127.0.0.1" if dev else "0.0.0.0")

    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        reload=dev,
        log_level="debug" if settings.debug else "info",
        proxy_headers=not dev,
    )


if __name__ == "__main__":
    main()
