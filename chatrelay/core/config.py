# chatrelay/core/config.py
import os
from pathlib import Path

from dotenv import load_dotenv


class Settings:
    """
    Setup environment variables.
        - HOST / PORT the address the server listens on
        - STATIC_DIR the directory static assets are served from
        - BOT_NAME the sender name used for system notices
        - CHAT_TIMEZONE the IANA timezone message timestamps are rendered in
    """

    # Load environment variables from the .env file
    load_dotenv()

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Defaults to public/ at the project root, wherever the server is started from
    STATIC_DIR: str = os.getenv(
        "STATIC_DIR", str(Path(__file__).resolve().parents[2] / "public")
    )

    BOT_NAME: str = os.getenv("BOT_NAME", "XeroxChat Bot")
    CHAT_TIMEZONE: str = os.getenv("CHAT_TIMEZONE", "Asia/Dhaka")


settings = Settings()
