"""Tests for the GitHub GraphQL search client."""
from unittest.mock import AsyncMock
import pytest
from metrichunter.domain.models import GitInput, SearchRequest
from metrichunter.infrastructure.github_client import GitHubGraphQLClient


def make_node(repo_id, owner, name, language="C#"):
    return {
        "databaseId": repo_id,
        "name": name,
        "owner": {"login": owner},
        "primaryLanguage": {"name": language},
        "diskUsage": 1024,
        "stargazerCount": 50,
        "licenseInfo": {"name": "MIT License"},
        "url": f"https://github.com/{owner}/{name}",
        "description": None,
    }


def make_page(nodes, has_next, cursor=None):
    return {
        "search": {
            "pageInfo": {"hasNextPage": has_next, "endCursor": cursor},
            "nodes": nodes,
        },
        "rateLimit": {"remaining": 4000, "resetAt": "2024-01-01T00:00:00Z"},
    }


def test_to_repository_maps_fields():
    """Test a search node becomes a Repository entity."""
    repository = GitHubGraphQLClient._to_repository(make_node(9, "dotnet", "runtime"))

    assert repository.repo_id == 9
    assert repository.full_name == "dotnet/runtime"
    assert repository.language == "C#"
    assert repository.size == 1024
    assert repository.license_name == "MIT License"


def test_to_repository_skips_incomplete_nodes():
    """Test nodes without owner or id are dropped."""
    assert GitHubGraphQLClient._to_repository({"name": "x"}) is None
    node = make_node(None, "o", "n")
    assert GitHubGraphQLClient._to_repository(node) is None


@pytest.mark.asyncio
async def test_search_repositories_paginates():
    """Test pages are followed until the count is reached."""
    client = GitHubGraphQLClient("token", page_size=2)
    client._execute_query = AsyncMock(side_effect=[
        make_page([make_node(1, "a", "one"), make_node(2, "b", "two")], True, "c1"),
        make_page([make_node(3, "c", "three")], False),
    ])

    output = await client.search_repositories(GitInput(language="C#", count=3))

    assert [repo.repo_id for repo in output.repositories] == [1, 2, 3]
    assert output.failed_requests == frozenset()
    second_request, first = client._execute_query.call_args_list[1].args
    assert second_request == SearchRequest(query="language:C# sort:stars-desc", cursor="c1")
    assert first == 1


@pytest.mark.asyncio
async def test_failed_page_is_recorded():
    """Test a failing request ends the search and is reported."""
    client = GitHubGraphQLClient("token", page_size=1)
    client._execute_query = AsyncMock(side_effect=[
        make_page([make_node(1, "a", "one")], True, "c1"),
        RuntimeError("boom"),
    ])

    output = await client.search_repositories(GitInput(language="Java", count=5))

    assert len(output.repositories) == 1
    assert output.failed_requests == frozenset({
        SearchRequest(query="language:Java sort:stars-desc", cursor="c1")
    })
