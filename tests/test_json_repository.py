"""Tests for JSON repository storage."""
import pytest
from metrichunter.domain.exceptions import ConfigurationError
from metrichunter.domain.models import Repository
from metrichunter.infrastructure.json_repository import JsonRepositoryStorage


def test_save_and_load_repositories(tmp_path):
    """Test repositories survive a save and load."""
    storage = JsonRepositoryStorage()
    repositories = [
        Repository(
            repo_id=1,
            owner="dotnet",
            name="runtime",
            language="C#",
            size=2048,
            star_count=15000,
            url="https://github.com/dotnet/runtime",
            license_name="MIT License",
            description="The .NET runtime"
        ),
        Repository(repo_id=2, owner="google", name="guava", language="Java"),
    ]
    path = tmp_path / "saved" / "repositories.json"

    storage.save_repositories(repositories, str(path))

    assert storage.load_repositories(str(path)) == repositories


def test_save_without_repositories_is_rejected(tmp_path):
    """Test saving nothing is a configuration error."""
    with pytest.raises(ConfigurationError):
        JsonRepositoryStorage().save_repositories([], str(tmp_path / "repositories.json"))


def test_load_without_path_is_rejected():
    """Test loading needs a path."""
    with pytest.raises(ConfigurationError):
        JsonRepositoryStorage().load_repositories("")


def test_load_missing_file_raises(tmp_path):
    """Test a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        JsonRepositoryStorage().load_repositories(str(tmp_path / "missing.json"))
