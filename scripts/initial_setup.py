"""Create the data directory and bring the database schema up to date."""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import get_settings
from app.database import run_migrations


def main() -> None:
    settings = get_settings()
    run_migrations()
    print("Database initialised at", settings.database_url)
    if settings.anthropic_api_key is None:
        print("ANTHROPIC_API_KEY is not set: AI analysis endpoints will answer 500 until it is.")


if __name__ == "__main__":
    main()
