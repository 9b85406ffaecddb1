import logging
import time
from pathlib import Path
from typing import Optional

OUTPUT_PREFIX = "SkyGen_"
OUTPUT_SUFFIX = ".png"


def get_timestamp_ms() -> int:
    return int(time.time() * 1000)


def build_output_filename(timestamp_ms: int) -> str:
    """SkyGen_<millisecond epoch>.png"""
    return f"{OUTPUT_PREFIX}{timestamp_ms}{OUTPUT_SUFFIX}"


def save_image_bytes(output_dir: Path, image_data: bytes, timestamp_ms: Optional[int] = None) -> Path:
    """
    Write the downloaded image into output_dir, creating it if needed.
    Returns the path of the written file.
    """
    output_dir = Path(output_dir)
    if not output_dir.exists():
        logging.getLogger(__name__).info("Creating output dir: %s", output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    if timestamp_ms is None:
        timestamp_ms = get_timestamp_ms()
    save_path = output_dir / build_output_filename(timestamp_ms)
    save_path.write_bytes(image_data)
    return save_path


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
