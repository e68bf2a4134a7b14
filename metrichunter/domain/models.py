"""Domain models representing core business entities."""
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class Repository:
    """Immutable domain entity representing a GitHub repository.

    Using frozen dataclass so a repository can't change while a hunt runs.
    """
    repo_id: int
    owner: str
    name: str
    language: str
    size: int = 0
    star_count: int = 0
    url: str = ""
    license_name: Optional[str] = None
    description: Optional[str] = None

    @property
    def full_name(self) -> str:
        """Returns the full repository name (owner/name)."""
        return f"{self.owner}/{self.name}"

    @property
    def license_display(self) -> str:
        return self.license_name or "No License"

    @property
    def size_string(self) -> str:
        """Human readable size; GitHub reports size in kilobytes."""
        if self.size < 1024:
            return f"{self.size} KB"
        if self.size < 1024 * 1024:
            return f"{round(self.size / 1024.0, 2)} MB"
        return f"{round(self.size / 1024.0 / 1024.0, 2)} GB"

    def with_language(self, language: str) -> 'Repository':
        """Returns a new Repository instance tagged with the given language."""
        return Repository(
            repo_id=self.repo_id,
            owner=self.owner,
            name=self.name,
            language=language,
            size=self.size,
            star_count=self.star_count,
            url=self.url,
            license_name=self.license_name,
            description=self.description
        )


@dataclass(frozen=True)
class Metric:
    """A single metric extracted from an analysis report.

    The value is kept as raw text, no numeric coercion happens here.
    """
    name: str
    value: str


@dataclass(frozen=True)
class SearchRequest:
    """A single page request sent to the GitHub search API."""
    query: str
    cursor: Optional[str] = None


@dataclass(frozen=True)
class GitInput:
    """Search criteria for hunting repositories."""
    language: Optional[str] = None
    topic: Optional[str] = None
    count: int = 10
    order: str = "desc"

    def to_query(self) -> str:
        """Build the GitHub search query string."""
        parts = []
        if self.language:
            parts.append(f"language:{self.language}")
        if self.topic:
            for topic in self.topic.replace(",", " ").split():
                parts.append(f"topic:{topic}")
        parts.append(f"sort:stars-{self.order}")
        return " ".join(parts)


@dataclass(frozen=True)
class GitOutput:
    """Result of a repository search: what came back and what failed."""
    repositories: List[Repository]
    failed_requests: FrozenSet[SearchRequest] = field(default_factory=frozenset)


@dataclass(frozen=True)
class HuntResult:
    """Outcome of a metrics batch run."""
    csv: str
    repositories_analyzed: int
    repositories_skipped: int
    repositories_failed: int
    duration_seconds: float
