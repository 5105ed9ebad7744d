"""Start the API with uvicorn using APP_HOST / APP_PORT from settings."""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn

from app.config import get_settings
from app.database import run_migrations


def main() -> None:
    settings = get_settings()
    run_migrations()
    uvicorn.run(
        "app.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
