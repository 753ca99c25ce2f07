"""Ref mirroring engine for refmirror.

A mirror run fetches every ref of the source repository into a scratch
bare repository, works out the refspecs that make the destination match
the source, and pushes them in a single pack. Destination refs that the
source no longer has are deleted, except those matching an exclude
pattern (read-only refs such as ``refs/pull/*`` by default).
"""

from __future__ import annotations

import fnmatch
import logging
import tempfile
import time
from collections.abc import Mapping, Sequence
from contextlib import ExitStack

from dulwich.client import get_transport_and_path
from dulwich.errors import GitProtocolError, NotGitRepository
from dulwich.objects import ZERO_SHA
from dulwich.repo import Repo

from refmirror.config.schema import MirrorConfig
from refmirror.core.exceptions import MirrorError
from refmirror.core.models import HEAD_REF, MirrorResult, RefSpec
from refmirror.core.ssh import SSHCredentials, is_ssh_url
from refmirror.utils.repo import new_bare_repo, specs_to_strings
from refmirror.utils.slices import sort_slice

logger = logging.getLogger(__name__)

PEELED_SUFFIX = "^{}"

TRANSPORT_ERRORS = (GitProtocolError, NotGitRepository, OSError)


def is_hidden(name: str, exclude: Sequence[str] = ()) -> bool:
    """Check whether a ref is left out of mirroring.

    ``HEAD`` and peeled tag entries are never mirrored; other refs are
    hidden when they match one of the ``exclude`` fnmatch patterns.
    """
    if name == HEAD_REF or name.endswith(PEELED_SUFFIX):
        return True
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in exclude)


def push_refspecs(
    source_refs: Mapping[str, str],
    destination_refs: Mapping[str, str],
    exclude: Sequence[str] = (),
) -> list[RefSpec]:
    """Compute the refspecs that make the destination mirror the source.

    Every visible source ref gets a forced ``+ref:ref`` spec and every
    visible destination ref missing from the source gets a ``:ref``
    delete spec.

    Args:
        source_refs: Ref name to commit id on the source.
        destination_refs: Ref name to commit id on the destination.
        exclude: fnmatch patterns of refs that are neither pushed nor pruned.

    Returns:
        Refspecs sorted by destination ref name.
    """
    by_name: dict[str, RefSpec] = {}
    for name in source_refs:
        if not is_hidden(name, exclude):
            by_name[name] = RefSpec.force(name)
    for name in destination_refs:
        if name not in source_refs and not is_hidden(name, exclude):
            by_name[name] = RefSpec.delete(name)
    return [by_name[name] for name in sort_slice(list(by_name))]


class Mirror:
    """Mirror all refs from ``config.source`` to ``config.destination``.

    Example:
        >>> config = MirrorConfig(source="/srv/git/app.git", destination="/srv/mirror/app.git")
        >>> result = Mirror(config).run()
        >>> result.updated
        ['refs/heads/master', 'refs/tags/v1.0']
    """

    def __init__(self, config: MirrorConfig):
        self.config = config

    def run(self) -> MirrorResult:
        """Execute the mirror run.

        Returns:
            MirrorResult describing the refs pushed and pruned.

        Raises:
            ConfigError: If source or destination is missing or identical.
            RepositoryError: If the scratch repository cannot be created.
            MirrorError: If fetching or pushing fails.
        """
        self.config.check_remotes()
        source = self.config.source
        destination = self.config.destination
        start_time = time.time()

        with ExitStack() as stack:
            workdir = stack.enter_context(tempfile.TemporaryDirectory(prefix="refmirror-"))
            credentials = self._credentials(stack)

            repo = new_bare_repo(workdir)
            stack.callback(repo.close)

            source_refs = self._fetch(repo, source, credentials)
            result = self._push(repo, source_refs, destination, credentials)

        result.duration = time.time() - start_time
        logger.info(
            f"Mirrored {source} to {destination}: {len(result.updated)} updated, "
            f"{len(result.deleted)} deleted, {len(result.unchanged)} unchanged"
            + (" (dry run)" if result.dry_run else "")
        )
        return result

    def _credentials(self, stack: ExitStack) -> SSHCredentials | None:
        key = self.config.private_key()
        if key is None:
            return None
        remotes = [self.config.source or "", self.config.destination or ""]
        if not any(is_ssh_url(remote) for remote in remotes):
            logger.debug("SSH private key configured but no remote uses SSH")
            return None
        return stack.enter_context(SSHCredentials(key, self.config.ssh_known_hosts))

    def _client(self, url: str, credentials: SSHCredentials | None):
        kwargs = {}
        if credentials is not None and is_ssh_url(url):
            kwargs["ssh_command"] = credentials.ssh_command
        try:
            return get_transport_and_path(url, **kwargs)
        except ValueError as e:
            raise MirrorError(f"Unsupported repository location: {e}", remote=url) from e

    def _fetch(self, repo: Repo, source: str, credentials: SSHCredentials | None) -> dict[str, str]:
        """Fetch every visible source ref into ``repo``.

        Returns:
            Ref name to commit id for the refs stored in ``repo``.
        """
        exclude = self.config.exclude
        client, path = self._client(source, credentials)

        def determine_wants(refs, depth=None):
            wants = []
            for name, sha in refs.items():
                if not sha or sha == ZERO_SHA or is_hidden(name.decode(), exclude):
                    continue
                if sha not in wants and sha not in repo.object_store:
                    wants.append(sha)
            return wants

        logger.debug(f"Fetching refs from {source}")
        try:
            fetched = client.fetch(path, repo, determine_wants=determine_wants)
        except TRANSPORT_ERRORS as e:
            raise MirrorError(f"Failed to fetch from source: {e}", remote=source) from e

        source_refs: dict[str, str] = {}
        for name, sha in fetched.refs.items():
            ref = name.decode()
            if not sha or sha == ZERO_SHA or is_hidden(ref, exclude):
                continue
            repo.refs[name] = sha
            source_refs[ref] = sha.decode("ascii")

        logger.info(f"Fetched {len(source_refs)} refs from {source}")
        logger.debug(f"Source refs: {sort_slice(list(source_refs))}")
        return source_refs

    def _push(
        self,
        repo: Repo,
        source_refs: dict[str, str],
        destination: str,
        credentials: SSHCredentials | None,
    ) -> MirrorResult:
        exclude = self.config.exclude
        dry_run = self.config.dry_run
        result = MirrorResult(source=self.config.source, destination=destination, dry_run=dry_run)
        client, path = self._client(destination, credentials)

        def update_refs(remote_refs):
            destination_refs = {
                name.decode(): sha.decode("ascii")
                for name, sha in remote_refs.items()
                if sha and sha != ZERO_SHA
            }
            specs = push_refspecs(source_refs, destination_refs, exclude)
            result.specs = specs_to_strings(specs)
            logger.debug(f"Push refspecs: {result.specs}")

            # HEAD is left to the destination
            new_refs = {name: sha for name, sha in remote_refs.items() if name.decode() != HEAD_REF}
            for spec in specs:
                target = spec.destination
                if spec.is_delete:
                    result.deleted.append(target)
                    new_sha = ZERO_SHA
                elif destination_refs.get(target) == source_refs[spec.source]:
                    result.unchanged.append(target)
                    continue
                else:
                    result.updated.append(target)
                    new_sha = source_refs[spec.source].encode("ascii")
                if not dry_run:
                    new_refs[target.encode()] = new_sha

            return new_refs

        logger.debug(f"Pushing to {destination}")
        try:
            pushed = client.send_pack(path, update_refs, generate_pack_data=repo.generate_pack_data)
        except TRANSPORT_ERRORS as e:
            raise MirrorError(f"Failed to push to destination: {e}", remote=destination) from e

        ref_status = getattr(pushed, "ref_status", None) or {}
        rejected = {name.decode(): reason for name, reason in ref_status.items() if reason is not None}
        if rejected:
            raise MirrorError(
                f"Destination rejected {len(rejected)} ref update(s)",
                remote=destination,
                context={"rejected": rejected},
            )

        return result


def mirror(config: MirrorConfig) -> MirrorResult:
    """Mirror refs according to ``config``. See :class:`Mirror`."""
    return Mirror(config).run()
