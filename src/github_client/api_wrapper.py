"""API wrapper for the GitHub REST API v3.

This module wraps a ``requests`` session and provides error translation from
HTTP exceptions to our typed exception hierarchy. It integrates with the
retry logic for handling rate limits.
"""

import base64
import logging
import re
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote

import requests
from requests.exceptions import Timeout, ConnectTimeout, ReadTimeout, ConnectionError

from src.models.repository import RemoteRepository
from src.models.tree_entry import TreeEntry

from .auth import Authenticator
from .errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    RepositoryNotFoundError,
)
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

WEB_URL = "https://github.com"
USER_AGENT = "github-md-mirror"

# Owner and repository names on GitHub
NAME_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')


class APIWrapper:
    """Thin client over the GitHub REST API with error translation.

    This class provides the remote capability consumed by the mirror engine:
    1. Paginated repository listing by user or organization
    2. Branch to commit resolution
    3. Recursive tree listing for a commit
    4. Blob fetch (base64 decoded)

    Example:
        >>> api = APIWrapper(Authenticator())
        >>> sha = api.resolve_branch_head("octocat", "hello-world", "main")
        >>> entries = api.list_tree("octocat", "hello-world", sha)
    """

    def __init__(
        self,
        authenticator: Authenticator,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        per_page: int = 100,
    ):
        """Initialize the API wrapper.

        Args:
            authenticator: Authenticator instance for loading the token
            session: Optional pre-built session (used by tests)
            timeout: Per-request timeout in seconds
            per_page: Page size for repository listings (GitHub maximum is 100)
        """
        self._authenticator = authenticator
        self._session = session
        self._timeout = timeout
        self.per_page = per_page

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session with auth headers.

        Raises:
            InvalidCredentialsError: If no token is configured
        """
        if self._session is None:
            creds = self._authenticator.get_credentials()
            session = requests.Session()
            session.headers.update({
                'Authorization': f'token {creds.token}',
                'Accept': 'application/vnd.github.v3+json',
                'User-Agent': USER_AGENT,
            })
            self._session = session
        return self._session

    def _api_url(self) -> str:
        return self._authenticator.get_credentials().api_url

    def _validate_name(self, value: str, kind: str) -> None:
        """Validate an owner or repository name before it goes into a URL.

        Raises:
            ValueError: If the name is empty or contains unexpected characters
        """
        if not value or not str(value).strip():
            raise ValueError(f"{kind} cannot be empty")
        if not NAME_PATTERN.match(value) or value in ('.', '..'):
            raise ValueError(
                f"Invalid {kind} format: '{value}'. "
                f"Only letters, digits, '-', '_' and '.' are allowed."
            )

    def _sanitize_credentials(self, text: str) -> str:
        """Mask tokens in error messages before they are logged.

        Example:
            >>> api._sanitize_credentials("Authorization: token ghp_abc123")
            'Authorization: ***REDACTED***'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'://([\w.-]+):([\w.-]+)@',
            r'://***:***@',
            text
        )
        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        # Classic and fine-grained personal access tokens
        sanitized = re.sub(
            r'\b(ghp|gho|ghu|ghs|ghr|github_pat)_[A-Za-z0-9_]{8,}\b',
            '***REDACTED***',
            sanitized
        )
        sanitized = re.sub(
            r'(access_token|token)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _translate_error(self, exception: Exception, operation: str) -> Exception:
        """Translate HTTP exceptions to typed GitHub exceptions.

        Args:
            exception: The original exception from requests
            operation: Description of the operation that failed

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        if isinstance(exception, (Timeout, ConnectTimeout, ReadTimeout, ConnectionError)):
            return APIUnreachableError(endpoint=self._api_url())

        response = getattr(exception, 'response', None)
        status_code = getattr(response, 'status_code', None)

        if status_code == 401:
            return InvalidCredentialsError(
                endpoint=self._api_url(),
                reason="401 Unauthorized"
            )

        if status_code == 404:
            return RepositoryNotFoundError(resource=operation)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        if status_code == 403:
            return APIAccessError(f"GitHub API access forbidden during {operation}")
        return APIAccessError(f"GitHub API failure during {operation}")

    def _get(self, endpoint: str, operation: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET a JSON document from the API.

        Raises:
            InvalidCredentialsError, RepositoryNotFoundError,
            APIUnreachableError, APIAccessError
        """
        session = self._get_session()
        url = f"{self._api_url()}{endpoint}"

        def _fetch():
            response = session.get(url, params=params, timeout=self._timeout)
            response.raise_for_status()
            return response.json()

        try:
            return retry_on_rate_limit(_fetch)
        except APIAccessError:
            raise
        except Exception as e:
            raise self._translate_error(e, operation) from e

    def _paginate(self, endpoint: str, operation: str) -> List[Dict[str, Any]]:
        """Collect all pages of a listing endpoint.

        Stops on an empty page or a page shorter than ``per_page``, so a
        full page followed by an empty one costs exactly two requests.
        """
        items: List[Dict[str, Any]] = []
        page = 1

        while True:
            page_items = self._get(
                endpoint,
                f"{operation} page {page}",
                params={
                    'per_page': self.per_page,
                    'page': page,
                    'sort': 'updated',
                    'direction': 'desc',
                },
            )

            if not page_items:
                break

            items.extend(page_items)

            if len(page_items) < self.per_page:
                break

            page += 1

        logger.debug(f"{operation}: {len(items)} item(s) over {page} page(s)")
        return items

    @staticmethod
    def _to_repository(raw: Dict[str, Any]) -> RemoteRepository:
        return RemoteRepository(
            name=raw['name'],
            owner=raw['owner']['login'],
            default_branch=raw.get('default_branch') or 'main',
            private=bool(raw.get('private', False)),
            fork=bool(raw.get('fork', False)),
            archived=bool(raw.get('archived', False)),
        )

    def list_user_repos(self, username: str) -> List[RemoteRepository]:
        """List all repositories of a user.

        Raises:
            RepositoryNotFoundError: If the user does not exist
        """
        self._validate_name(username, 'username')
        raw = self._paginate(f"/users/{username}/repos", f"list_user_repos({username})")
        return [self._to_repository(item) for item in raw]

    def list_org_repos(self, org: str) -> List[RemoteRepository]:
        """List all repositories of an organization.

        Raises:
            RepositoryNotFoundError: If the organization does not exist
        """
        self._validate_name(org, 'organization')
        raw = self._paginate(f"/orgs/{org}/repos", f"list_org_repos({org})")
        return [self._to_repository(item) for item in raw]

    def resolve_branch_head(self, owner: str, repo: str, branch: str) -> str:
        """Resolve a branch name to the commit sha at its head.

        Raises:
            RepositoryNotFoundError: If the repository or branch does not exist
        """
        self._validate_name(owner, 'owner')
        self._validate_name(repo, 'repository')
        if not branch or not branch.strip():
            raise ValueError("branch cannot be empty")

        data = self._get(
            f"/repos/{owner}/{repo}/branches/{quote(branch, safe='/')}",
            f"resolve_branch_head({owner}/{repo}@{branch})",
        )
        return data['commit']['sha']

    def list_tree(self, owner: str, repo: str, sha: str) -> List[TreeEntry]:
        """List the full recursive tree of a commit.

        Returns:
            List of TreeEntry objects (blobs and trees)
        """
        self._validate_name(owner, 'owner')
        self._validate_name(repo, 'repository')

        data = self._get(
            f"/repos/{owner}/{repo}/git/trees/{sha}",
            f"list_tree({owner}/{repo}@{sha[:7]})",
            params={'recursive': '1'},
        )

        if data.get('truncated'):
            logger.warning(
                f"Tree listing for {owner}/{repo} was truncated by GitHub; "
                f"some files will not be mirrored"
            )

        entries = []
        for item in data.get('tree', []):
            if item.get('type') not in ('blob', 'tree'):
                # Submodules show up as "commit" entries
                continue
            entries.append(TreeEntry(
                path=item['path'],
                type=item['type'],
                sha=item['sha'],
                size=item.get('size'),
            ))
        return entries

    def fetch_blob(
        self,
        owner: str,
        repo: str,
        entry: TreeEntry,
        binary: bool = False
    ) -> Union[bytes, str]:
        """Fetch the content of a blob.

        Args:
            owner: Repository owner
            repo: Repository name
            entry: Tree entry of the blob
            binary: Return raw bytes instead of UTF-8 text

        Returns:
            bytes when ``binary`` is set, otherwise str
        """
        self._validate_name(owner, 'owner')
        self._validate_name(repo, 'repository')

        data = self._get(
            f"/repos/{owner}/{repo}/git/blobs/{entry.sha}",
            f"fetch_blob({owner}/{repo}:{entry.path})",
        )

        content = data.get('content', '')
        if data.get('encoding') == 'base64':
            raw = base64.b64decode(content)
        else:
            raw = content.encode('utf-8')

        if binary:
            return raw
        return raw.decode('utf-8', errors='replace')

    @staticmethod
    def build_file_url(owner: str, repo: str, path: str, branch: str = 'main') -> str:
        """Browser URL of a file on GitHub."""
        return f"{WEB_URL}/{owner}/{repo}/blob/{branch}/{path}"
