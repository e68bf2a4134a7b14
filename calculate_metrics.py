"""Calculate metrics for previously saved and already cloned repositories."""
import asyncio
import logging
import sys
from pathlib import Path
from metrichunter.bootstrap import build_hunter_service
from metrichunter.config import Settings, configure_logging, load_settings


logger = logging.getLogger(__name__)


async def calculate(settings: Settings, repositories_json: str, output_file: str) -> None:
    """Analyze the repositories listed in a JSON file and export CSV.

    Args:
        settings: Runtime settings
        repositories_json: File written by a previous search
        output_file: Path to output CSV file
    """
    service, process_runner = build_hunter_service(settings)

    try:
        repositories = service.load_repositories(repositories_json)
        result = await service.calculate_metrics(repositories)
        Path(output_file).write_text(result.csv, encoding="utf-8", newline="")
        logger.info(
            f"Exported metrics of {result.repositories_analyzed} repositories to {output_file} "
            f"({result.repositories_skipped} skipped, {result.repositories_failed} failed)"
        )
    except Exception as e:
        logger.error(f"Error calculating metrics: {e}")
        sys.exit(1)
    finally:
        await process_runner.kill_all_processes()
        await service.close()


if __name__ == "__main__":
    settings = load_settings()
    configure_logging(settings.log_level)
    repositories_json = sys.argv[1] if len(sys.argv) > 1 else (settings.repositories_json or "")
    output_file = sys.argv[2] if len(sys.argv) > 2 else settings.output_csv
    asyncio.run(calculate(settings, repositories_json, output_file))
