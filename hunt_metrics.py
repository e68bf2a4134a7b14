"""Main entry point for the metric hunter.

Searches GitHub, then clones, analyzes and deletes every repository found
and writes the collected metrics to a CSV file. With DOWNLOAD_ONLY set the
repositories are only cloned, ready for calculate_metrics.py.
"""
import asyncio
import logging
import sys
from pathlib import Path
from metrichunter.application.hunter_service import repository_listing
from metrichunter.bootstrap import build_hunter_service
from metrichunter.config import configure_logging, load_settings
from metrichunter.domain.models import GitInput


logger = logging.getLogger(__name__)


async def main():
    """Execute the hunting operation."""
    settings = load_settings()
    configure_logging(settings.log_level)

    if not settings.github_token:
        logger.error("GITHUB_TOKEN environment variable is required")
        sys.exit(1)

    git_input = GitInput(
        language=settings.language,
        topic=settings.topic,
        count=settings.count,
        order=settings.order
    )

    service, process_runner = build_hunter_service(settings)
    logger.info(f"Supported languages: {', '.join(sorted(service.supported_languages()))}")

    try:
        git_output = await service.search_repositories(git_input)
        logger.info(f"Found {len(git_output.repositories)} repositories:")
        for line in repository_listing(git_output.repositories):
            logger.info(f"  {line}")

        if settings.repositories_json and git_output.repositories:
            service.save_repositories(git_output.repositories, settings.repositories_json)

        if settings.download_only:
            cloned = await service.download_repositories(git_output.repositories)
            logger.info(f"Downloaded {cloned} repositories, skipping analysis")
            return

        result = await service.hunt_repositories(git_output.repositories)
        Path(settings.output_csv).write_text(result.csv, encoding="utf-8", newline="")

        # Log results
        logger.info("=" * 50)
        logger.info("Hunt Metrics:")
        logger.info(f"  Repositories found: {len(git_output.repositories)}")
        logger.info(f"  Failed search requests: {len(git_output.failed_requests)}")
        logger.info(f"  Analyzed: {result.repositories_analyzed}")
        logger.info(f"  Skipped: {result.repositories_skipped}")
        logger.info(f"  Failed: {result.repositories_failed}")
        logger.info(f"  Duration: {result.duration_seconds:.2f} seconds")
        logger.info(f"  CSV written to {settings.output_csv}")
        logger.info("=" * 50)

    except Exception as e:
        logger.error(f"Hunt failed: {e}", exc_info=True)
        sys.exit(1)
    finally:
        # Also reached on Ctrl+C, SourceMonitor must not be left running
        await process_runner.kill_all_processes()
        await service.close()


if __name__ == "__main__":
    asyncio.run(main())
