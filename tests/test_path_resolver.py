"""Tests for the language scoped path layout."""
from metrichunter.infrastructure.path_resolver import PathResolver


def test_build_path_is_deterministic(tmp_path):
    """Test identical inputs give identical paths without creating anything."""
    resolver = PathResolver(tmp_path)

    first = resolver.build_path("Java", "Reports", "google/guava.xml")
    second = resolver.build_path("Java", "Reports", "google/guava.xml")

    assert first == second
    assert first == tmp_path / "Java" / "Reports" / "google" / "guava.xml"
    assert not (tmp_path / "Java").exists()


def test_build_and_create_path_creates_directories(tmp_path):
    """Test the whole directory chain exists afterwards."""
    resolver = PathResolver(tmp_path)

    path = resolver.build_and_create_path("C#", "SourceMonitor", "dotnet")

    assert path == tmp_path / "C#" / "SourceMonitor" / "dotnet"
    assert path.is_dir()

    # Creating again is harmless
    assert resolver.build_and_create_path("C#", "SourceMonitor", "dotnet") == path
