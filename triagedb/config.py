import os
from dotenv import load_dotenv

from triagedb.errors import ConfigurationError

load_dotenv()


class Settings:
    MONGODB_URL: str = os.getenv("MONGODB_URL", "")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "")
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = int(
        os.getenv("MONGODB_SERVER_SELECTION_TIMEOUT_MS", "10000")
    )
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def require_database(self) -> tuple[str, str]:
        """Return (url, database name) or fail before any storage call is made."""
        missing = [
            name
            for name, value in (("MONGODB_URL", self.MONGODB_URL), ("MONGODB_DB", self.MONGODB_DB))
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing MongoDB configuration. Ensure MONGODB_URL and MONGODB_DB are set "
                f"(missing: {', '.join(missing)})."
            )
        return self.MONGODB_URL, self.MONGODB_DB


settings = Settings()
