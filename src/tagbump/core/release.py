"""Release orchestration.

A release happens in two phases:

1. :func:`plan_release` decides what to release. It is a pure function
   of the commit history, the last tag and the configuration.
2. :func:`apply_release` carries the plan out: it rewrites manifests,
   prepends the changelog, commits, tags and optionally pushes.

When no commit requires a version bump there is no plan, and nothing
is written, committed or tagged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tagbump.core.bump import resolve_bump
from tagbump.core.changelog import generate_changelog, prepend_changelog
from tagbump.core.commits import parse_commits
from tagbump.core.version import parse_last_tag
from tagbump.exceptions import DirtyRepositoryError, TagError
from tagbump.project.patchers import update_manifest

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from pathlib import Path

    from tagbump.config.models import TagbumpConfig
    from tagbump.core.commits import ParsedCommit
    from tagbump.core.version import BumpType, Version
    from tagbump.vcs.git import Commit, GitRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleasePlan:
    """Everything needed to perform a release."""

    current_version: Version
    next_version: Version
    bump: BumpType
    tag: str
    version_string: str
    changelog: str
    commits: tuple[ParsedCommit, ...] = field(default_factory=tuple)
    previous_tag: str | None = None


@dataclass(frozen=True)
class ReleaseResult:
    """What :func:`apply_release` changed."""

    plan: ReleasePlan
    changed_files: tuple[Path, ...]
    commit_sha: str | None
    pushed: bool = False


def plan_release(
    commits: Sequence[Commit],
    last_tag: str | None,
    config: TagbumpConfig,
    released_on: date,
    *,
    force: bool = False,
) -> ReleasePlan | None:
    """Decide the next release from commit history.

    Args:
        commits: Commits since ``last_tag``, oldest first
        last_tag: Name of the last release tag, None if never released
        config: Configuration
        released_on: Date shown in the changelog heading
        force: Release a patch version even without releasable commits

    Returns:
        ReleasePlan, or None when there is nothing to release

    Raises:
        InvalidVersionFormat: If ``last_tag`` exists but is not a version
    """
    current = parse_last_tag(last_tag)
    parsed = parse_commits(commits, config.commits)
    result = resolve_bump(parsed, current, force=force)

    if result.next_version is None:
        logger.info("No releasable changes since %s", last_tag or "the first commit")
        return None

    next_version = result.next_version
    pre_release = config.version.pre_release
    if pre_release:
        label = _prerelease_label(current, next_version, pre_release)
        next_version = next_version.with_prerelease(label)

    version_string = next_version.render(with_prerelease=True)
    tag = next_version.render(prefix=config.effective_tag_prefix, with_prerelease=True)
    changelog = generate_changelog(next_version, released_on, parsed, config.changelog, tag=tag)

    logger.info("Bump %s: %s -> %s", result.bump, current, version_string)
    return ReleasePlan(
        current_version=current,
        next_version=next_version,
        bump=result.bump,
        tag=tag,
        version_string=version_string,
        changelog=changelog,
        commits=tuple(parsed),
        previous_tag=last_tag,
    )


def _prerelease_label(current: Version, target: Version, label: str) -> str:
    """Return the pre-release label for ``target``.

    Releasing the same version line again iterates the label:
    ``rc`` becomes ``rc.1``, then ``rc.2`` and so on.
    """
    if current.prerelease is None or current.render() != target.render():
        return label
    if current.prerelease == label:
        return f"{label}.1"
    match = re.fullmatch(rf"{re.escape(label)}\.(\d+)", current.prerelease)
    if match:
        return f"{label}.{int(match.group(1)) + 1}"
    return label


def prepare_release(
    repo: GitRepository,
    config: TagbumpConfig,
    released_on: date,
    *,
    force: bool = False,
) -> ReleasePlan | None:
    """Read history from the repository and plan the release.

    Raises:
        CommitHistoryError: If commits cannot be read
        InvalidVersionFormat: If the last tag is malformed
    """
    last_tag = repo.get_latest_tag(f"{config.effective_tag_prefix}*")
    commits = repo.get_commits_since_tag(last_tag)
    logger.debug("Found %d commits since %s", len(commits), last_tag or "the first commit")
    return plan_release(commits, last_tag, config, released_on, force=force)


def apply_release(
    repo: GitRepository,
    plan: ReleasePlan,
    config: TagbumpConfig,
    project_path: Path,
    *,
    push: bool | None = None,
) -> ReleaseResult:
    """Write files, commit and tag a planned release.

    Args:
        repo: Repository to commit and tag in
        plan: Plan from :func:`plan_release`
        config: Configuration
        project_path: Directory manifest and changelog paths are relative to
        push: Push after tagging; defaults to ``config.git.push``

    Returns:
        ReleaseResult listing the files included in the release commit

    Raises:
        DirtyRepositoryError: If the tree is dirty and ``allow_dirty`` is off
        TagError: If the release tag already exists; nothing is written
        ProjectError: If a configured manifest cannot be processed
        ChangelogError: If the changelog cannot be written
        GitError: If committing, tagging or pushing fails
    """
    if not config.allow_dirty and repo.is_dirty():
        raise DirtyRepositoryError("Repository has uncommitted changes")
    if repo.tag_exists(plan.tag):
        raise TagError(f"Tag {plan.tag} already exists")

    changed: list[Path] = []

    for manifest in config.files:
        path = project_path / manifest.path
        if update_manifest(path, plan.version_string, manifest.format):
            changed.append(path)

    if config.changelog.enabled:
        changed.append(prepend_changelog(project_path / config.changelog.path, plan.changelog))

    commit_sha = None
    if changed:
        repo.add(changed)
        message = config.git.commit_message.format(tag=plan.tag, version=plan.version_string)
        commit_sha = repo.commit(message)
    else:
        logger.warning("No files changed, tagging the current HEAD")

    repo.create_tag(plan.tag, config.git.tag_message)
    logger.info("Tagged %s", plan.tag)

    should_push = config.git.push if push is None else push
    if should_push:
        repo.push(config.git.remote, repo.current_branch())
        logger.info("Pushed to %s", config.git.remote)

    return ReleaseResult(
        plan=plan,
        changed_files=tuple(changed),
        commit_sha=commit_sha,
        pushed=should_push,
    )
