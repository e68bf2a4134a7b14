"""Tests for the command line entry points."""
from unittest.mock import AsyncMock, Mock
import pytest
import calculate_metrics
import hunt_metrics
from metrichunter.config import Settings
from metrichunter.domain.models import GitOutput, HuntResult, Repository


def make_settings(**overrides):
    values = dict(
        github_token="token",
        work_dir=".",
        sourcemonitor_exe="SourceMonitor.exe",
        sourcemonitor_template=None,
        language="C#",
        topic=None,
        count=2,
        order="desc",
        output_csv="metrics.csv",
        repositories_json=None,
        log_level="INFO",
    )
    values.update(overrides)
    return Settings(**values)


def make_wiring(monkeypatch, module):
    service = Mock()
    service.supported_languages = Mock(return_value={"C#"})
    service.close = AsyncMock()
    process_runner = Mock()
    process_runner.kill_all_processes = AsyncMock(return_value=True)
    monkeypatch.setattr(module, "build_hunter_service", Mock(return_value=(service, process_runner)))
    return service, process_runner


@pytest.mark.asyncio
async def test_calculate_uses_given_settings(monkeypatch, tmp_path):
    """Test settings are passed in rather than loaded a second time."""
    monkeypatch.setattr(calculate_metrics, "load_settings", Mock(side_effect=AssertionError("reloaded")))
    service, process_runner = make_wiring(monkeypatch, calculate_metrics)
    service.load_repositories = Mock(return_value=[Repository(repo_id=1, owner="o", name="a", language="C#")])
    service.calculate_metrics = AsyncMock(return_value=HuntResult(
        csv="repository_id\r\n1\r\n",
        repositories_analyzed=1,
        repositories_skipped=0,
        repositories_failed=0,
        duration_seconds=0.1
    ))
    settings = make_settings()
    output = tmp_path / "out.csv"

    await calculate_metrics.calculate(settings, "repos.json", str(output))

    calculate_metrics.build_hunter_service.assert_called_once_with(settings)
    assert output.read_bytes() == b"repository_id\r\n1\r\n"
    process_runner.kill_all_processes.assert_awaited_once()
    service.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_hunt_download_only_skips_analysis(monkeypatch, caplog):
    """Test DOWNLOAD_ONLY clones the found repositories and stops there."""
    caplog.set_level("INFO")
    repos = [Repository(repo_id=1, owner="dotnet", name="runtime", language="C#", size=2048, star_count=5)]
    monkeypatch.setattr(hunt_metrics, "load_settings", Mock(return_value=make_settings(download_only=True)))
    monkeypatch.setattr(hunt_metrics, "configure_logging", Mock())
    service, process_runner = make_wiring(monkeypatch, hunt_metrics)
    service.search_repositories = AsyncMock(return_value=GitOutput(repositories=repos))
    service.download_repositories = AsyncMock(return_value=1)
    service.hunt_repositories = AsyncMock()

    await hunt_metrics.main()

    service.download_repositories.assert_awaited_once_with(repos)
    service.hunt_repositories.assert_not_called()
    process_runner.kill_all_processes.assert_awaited_once()
    assert "dotnet/runtime (C#) - 5 stars, 2.0 MB, No License" in caplog.text
