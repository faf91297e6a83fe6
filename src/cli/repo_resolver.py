"""Repository resolution: which repositories the current run mirrors.

Explicitly configured repositories are merged with repositories discovered
under the configured namespaces. Discovery treats each namespace first as a
user and, only if that listing fails, as an organization.
"""

import fnmatch
import logging
from typing import List

from src.file_mapper.models import AutoDefaults, MirrorConfig
from src.github_client.api_wrapper import APIWrapper
from src.github_client.errors import (
    APIUnreachableError,
    GitHubError,
    InvalidCredentialsError,
    NamespaceDiscoveryError,
)
from src.models.repository import RemoteRepository, RepoRef

from .models import ResolutionResult

logger = logging.getLogger(__name__)

DEFAULT_BRANCH = 'main'


def filter_repositories(repos: List[RemoteRepository], filters: AutoDefaults) -> List[RemoteRepository]:
    """Apply the auto-discovery filters.

    Private, archived and forked repositories are dropped unless the matching
    include flag is set, and the name must match ``repo_glob``
    (case-sensitive; ``*`` or empty disables name filtering).
    """
    kept = []
    for repo in repos:
        if repo.private and not filters.include_private:
            continue
        if repo.archived and not filters.include_archived:
            continue
        if repo.fork and not filters.include_forks:
            continue
        if filters.repo_glob and filters.repo_glob != '*':
            if not fnmatch.fnmatchcase(repo.name, filters.repo_glob):
                continue
        kept.append(repo)
    return kept


class RepoResolver:
    """Builds the ordered, de-duplicated repository list for a run.

    Example:
        >>> resolver = RepoResolver(api)
        >>> result = resolver.resolve(config)
        >>> [ref.repo_id for ref in result.repos]
        ['octocat/hello-world', 'octocat/spoon-knife']
    """

    def __init__(self, api: APIWrapper):
        self.api = api

    def discover_namespace(self, namespace: str) -> List[RemoteRepository]:
        """List the repositories of a user, falling back to an organization.

        Raises:
            NamespaceDiscoveryError: If both listings fail or GitHub cannot be reached
            InvalidCredentialsError: If the token is rejected
        """
        try:
            return self.api.list_user_repos(namespace)
        except APIUnreachableError as e:
            raise NamespaceDiscoveryError(namespace, str(e)) from e
        except (GitHubError, ValueError) as user_error:
            logger.debug(f"User listing failed for {namespace}, trying organization: {user_error}")

        try:
            return self.api.list_org_repos(namespace)
        except InvalidCredentialsError:
            raise
        except (GitHubError, ValueError) as org_error:
            raise NamespaceDiscoveryError(namespace, str(org_error)) from org_error

    def resolve(self, config: MirrorConfig) -> ResolutionResult:
        """Resolve manual and auto-discovered repositories.

        Manual entries come first (branch defaults to ``main``). Auto entries
        use the repository's default branch and are dropped when their id
        is already present. A namespace that cannot be listed is logged and
        skipped.

        Raises:
            InvalidCredentialsError: If the token is rejected during discovery
        """
        result = ResolutionResult()
        seen = set()

        for manual in config.repos:
            ref = RepoRef(
                owner=manual.owner,
                repo=manual.repo,
                branch=manual.branch or DEFAULT_BRANCH,
                origin='manual',
            )
            if ref.repo_id in seen:
                logger.warning(f"Duplicate repository in config ignored: {ref.repo_id}")
                continue
            seen.add(ref.repo_id)
            result.repos.append(ref)

        for namespace in config.namespaces:
            try:
                discovered = self.discover_namespace(namespace)
            except NamespaceDiscoveryError as e:
                logger.error(str(e))
                result.failed_namespaces.append(namespace)
                continue

            if not discovered:
                logger.info(f"No repositories found for {namespace}")
                continue

            kept = filter_repositories(discovered, config.auto_defaults)
            logger.info(f"{namespace}: {len(kept)} of {len(discovered)} repositories match filters")

            for repo in kept:
                if repo.repo_id in seen:
                    logger.debug(f"Skipping {repo.repo_id}: already configured")
                    continue
                seen.add(repo.repo_id)
                result.repos.append(RepoRef(
                    owner=repo.owner,
                    repo=repo.name,
                    branch=repo.default_branch or DEFAULT_BRANCH,
                    origin='auto',
                ))

        return result
