import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env
BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

class Settings:
    SKYGEN_URL: str = "https://gen-z-image.vercel.app"

    POLL_DELAY: float = 6.0  # seconds, fixed wait between submit and check

    OUTPUT_DIR: Path = Path(
        os.getenv("SKYGEN_OUTPUT_DIR", str(Path.home() / "Pictures" / "SkyGen"))
    ).expanduser()

    LOG_LEVEL: str = os.getenv("SKYGEN_LOG_LEVEL", "INFO")

settings = Settings()
