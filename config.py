import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Catalog files
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", "books.csv")
    members_file: str = os.getenv("LIBRARY_MEMBERS_FILE", "members.csv")
    autoload: bool = _env_flag("LIBRARY_AUTOLOAD")

    # Output
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    app_version: str = os.getenv("APP_VERSION", "1.0.0")


settings = Settings()
