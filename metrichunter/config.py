"""Configuration loaded from environment variables (.env supported)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Runtime settings of the metric hunter."""
    github_token: Optional[str]
    work_dir: str
    sourcemonitor_exe: str
    sourcemonitor_template: Optional[str]
    language: Optional[str]
    topic: Optional[str]
    count: int
    order: str
    output_csv: str
    repositories_json: Optional[str]
    log_level: str
    download_only: bool = False


def load_settings() -> Settings:
    """Build settings from environment variables.

    Variables from .env (or env) are loaded first without overriding
    variables already set in the environment.
    """
    # Load environment variables from .env or env file
    load_dotenv('.env') or load_dotenv('env')

    order = os.getenv("HUNT_ORDER", "desc").lower()
    if order not in ("asc", "desc"):
        order = "desc"

    return Settings(
        github_token=os.getenv("GITHUB_TOKEN"),
        work_dir=os.getenv("WORK_DIR", "."),
        sourcemonitor_exe=os.getenv("SOURCEMONITOR_EXE", "SourceMonitor.exe"),
        sourcemonitor_template=os.getenv("SOURCEMONITOR_TEMPLATE") or None,
        language=os.getenv("HUNT_LANGUAGE") or None,
        topic=os.getenv("HUNT_TOPIC") or None,
        count=int(os.getenv("HUNT_COUNT", "10")),
        order=order,
        output_csv=os.getenv("OUTPUT_CSV", "metrics.csv"),
        repositories_json=os.getenv("REPOSITORIES_JSON") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        download_only=os.getenv("DOWNLOAD_ONLY", "false").lower() in ("1", "true", "yes")
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
