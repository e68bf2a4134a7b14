"""GitHub GraphQL API client implementation with rate limiting and retry logic."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional, Set
from gql import gql, Client
from gql.transport.aiohttp import AIOHTTPTransport
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)
from metrichunter.domain.github_interface import IGitHubClient
from metrichunter.domain.models import GitInput, GitOutput, Repository, SearchRequest


logger = logging.getLogger(__name__)


class RateLimitException(Exception):
    """Exception raised when rate limit is hit."""
    pass


class GitHubGraphQLClient(IGitHubClient):
    """GitHub GraphQL API client with rate limiting and retry mechanisms.

    Implements the IGitHubClient port, providing an anti-corruption layer
    between the domain and GitHub's API.
    """

    # GraphQL query searching repositories with the fields a hunt needs
    SEARCH_QUERY = gql("""
        query SearchRepositories($query: String!, $first: Int!, $cursor: String) {
            search(
                query: $query
                type: REPOSITORY
                first: $first
                after: $cursor
            ) {
                pageInfo {
                    hasNextPage
                    endCursor
                }
                nodes {
                    ... on Repository {
                        databaseId
                        name
                        owner {
                            login
                        }
                        primaryLanguage {
                            name
                        }
                        diskUsage
                        stargazerCount
                        licenseInfo {
                            name
                        }
                        url
                        description
                    }
                }
            }
            rateLimit {
                remaining
                resetAt
            }
        }
    """)

    def __init__(self, access_token: str, page_size: int = 100):
        """Initialize GitHub client.

        Args:
            access_token: GitHub personal access token
            page_size: Number of repositories to fetch per request (max 100)
        """
        self._access_token = access_token
        self._page_size = min(page_size, 100)  # GitHub max is 100
        self._transport: Optional[AIOHTTPTransport] = None
        self._client: Optional[Client] = None
        self._rate_limit_remaining: int = 5000
        self._rate_limit_reset_at: Optional[datetime] = None

    async def _init_client(self) -> None:
        """Initialize the GraphQL client (lazy initialization)."""
        if self._client is None:
            headers = {"Authorization": f"Bearer {self._access_token}"}
            self._transport = AIOHTTPTransport(
                url="https://api.github.com/graphql",
                headers=headers
            )
            self._client = Client(
                transport=self._transport,
                fetch_schema_from_transport=False
            )

    async def _check_rate_limit(self) -> None:
        """Check and handle rate limiting."""
        if self._rate_limit_remaining <= 10 and self._rate_limit_reset_at:
            wait_time = (self._rate_limit_reset_at - datetime.now(timezone.utc)).total_seconds()
            if wait_time > 0:
                logger.warning(
                    f"Rate limit nearly exhausted. Waiting {wait_time:.0f} seconds "
                    f"until reset at {self._rate_limit_reset_at}"
                )
                await asyncio.sleep(wait_time + 1)  # Add 1 second buffer

    @retry(
        retry=retry_if_exception_type((RateLimitException, asyncio.TimeoutError)),
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        reraise=True
    )
    async def _execute_query(self, request: SearchRequest, first: int) -> dict:
        """Execute GraphQL query with retry logic.

        Args:
            request: Search query and pagination cursor
            first: Number of repositories to request

        Returns:
            Query result dictionary

        Raises:
            RateLimitException: When rate limit is hit
        """
        await self._init_client()
        await self._check_rate_limit()

        try:
            async with self._client as session:
                result = await session.execute(
                    self.SEARCH_QUERY,
                    variable_values={
                        "query": request.query,
                        "first": first,
                        "cursor": request.cursor
                    }
                )

                # Update rate limit info
                rate_limit = result.get("rateLimit") or {}
                self._rate_limit_remaining = rate_limit.get("remaining", 0)
                reset_at_str = rate_limit.get("resetAt")
                if reset_at_str:
                    self._rate_limit_reset_at = datetime.fromisoformat(
                        reset_at_str.replace("Z", "+00:00")
                    )

                logger.info(
                    f"Rate limit remaining: {self._rate_limit_remaining}, "
                    f"resets at: {self._rate_limit_reset_at}"
                )

                return result

        except Exception as e:
            logger.error(f"Error executing GraphQL query: {e}")
            if "rate limit" in str(e).lower():
                raise RateLimitException(str(e))
            raise

    @staticmethod
    def _to_repository(node: dict) -> Optional[Repository]:
        """Transform a GitHub API search node into a domain entity."""
        owner = (node.get("owner") or {}).get("login")
        name = node.get("name")
        repo_id = node.get("databaseId")
        if not owner or not name or repo_id is None:
            return None

        language = (node.get("primaryLanguage") or {}).get("name") or ""
        license_name = (node.get("licenseInfo") or {}).get("name")
        return Repository(
            repo_id=repo_id,
            owner=owner,
            name=name,
            language=language,
            size=node.get("diskUsage") or 0,
            star_count=node.get("stargazerCount", 0),
            url=node.get("url") or f"https://github.com/{owner}/{name}",
            license_name=license_name,
            description=node.get("description")
        )

    async def search_repositories(self, git_input: GitInput) -> GitOutput:
        """Search GitHub repositories.

        Paginates until the requested count is reached. A page that still
        fails after retries is recorded as a failed request and ends the
        search; repositories fetched so far are kept.

        Args:
            git_input: Search criteria

        Returns:
            GitOutput with the repositories and the failed requests
        """
        query = git_input.to_query()
        repositories: List[Repository] = []
        failed_requests: Set[SearchRequest] = set()
        cursor = None

        logger.info(f"Searching {git_input.count} repositories: {query}")

        while len(repositories) < git_input.count:
            request = SearchRequest(query=query, cursor=cursor)
            first = min(self._page_size, git_input.count - len(repositories))
            try:
                result = await self._execute_query(request, first)
            except Exception as e:
                logger.error(f"Search request failed ({request}): {e}")
                failed_requests.add(request)
                break

            search_result = result.get("search") or {}
            page_info = search_result.get("pageInfo") or {}

            for node in search_result.get("nodes") or []:
                if len(repositories) >= git_input.count:
                    break
                repository = self._to_repository(node or {})
                if repository is not None:
                    repositories.append(repository)

            # Check if there are more pages
            if not page_info.get("hasNextPage"):
                break

            cursor = page_info.get("endCursor")
            logger.info(f"Fetched {len(repositories)}/{git_input.count} repositories")

        logger.info(
            f"Search finished with {len(repositories)} repositories and "
            f"{len(failed_requests)} failed requests"
        )
        return GitOutput(repositories=repositories, failed_requests=frozenset(failed_requests))

    async def close(self) -> None:
        """Close the GraphQL client and transport."""
        if self._transport:
            await self._transport.close()
            self._transport = None
            self._client = None
