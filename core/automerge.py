"""Branch automerge decision."""

import asyncio
import logging

from .config import RepoConfig, get_global_config
from .git import GitRepo
from .models import AutomergeResult, BranchStatus
from .platform import Platform
from .status_checks import resolve_branch_status

logger = logging.getLogger(__name__)

STALE_MESSAGES = (
    "refusing to merge unrelated histories",
    "Not possible to fast-forward",
    "Updates were rejected because the tip of your current branch is behind",
)


def classify_merge_error(err: Exception) -> AutomergeResult:
    """Map a failed merge to an automerge outcome by its message."""
    message = str(err)
    if message == "not ready":
        logger.debug("Branch is not ready for automerge")
        return AutomergeResult.NOT_READY
    if any(text in message for text in STALE_MESSAGES):
        logger.debug("Branch automerge error: %s", message)
        logger.info("Branch is not up to date - cannot automerge")
        return AutomergeResult.STALE
    if "Protected branch" in message:
        if "status check" in message:
            logger.debug(
                "Branch is not ready for automerge: required status checks are remaining"
            )
            return AutomergeResult.NOT_READY
        if "reviewers" in message:
            logger.info(
                "Branch automerge is not possible due to branch protection (required reviewers): %s",
                message,
            )
            return AutomergeResult.FAILED
        logger.info("Branch automerge is not possible due to branch protection: %s", message)
        return AutomergeResult.FAILED
    logger.warning("Unknown error when attempting branch automerge: %s", message)
    return AutomergeResult.FAILED


async def try_branch_automerge(
    config: RepoConfig, platform: Platform, git: GitRepo
) -> AutomergeResult:
    """Merge ``config.branch_name`` directly if branch automerge applies.

    Args:
        config: Branch settings (automerge flags, branch name, ignore_tests)
        platform: Hosting platform used for PR and status queries
        git: Local repository used to perform the merge

    Returns:
        The automerge outcome
    """
    logger.debug("Checking if we can automerge branch")
    if not (config.automerge and config.automerge_type == "branch"):
        return AutomergeResult.NO_AUTOMERGE

    existing_pr = await platform.get_branch_pr(config.branch_name)
    if existing_pr:
        return AutomergeResult.PR_EXISTS

    branch_status = await resolve_branch_status(
        config.branch_name, config.ignore_tests, platform
    )
    if branch_status == BranchStatus.GREEN:
        logger.debug("Automerging branch")
        try:
            if get_global_config().dry_run:
                logger.info("DRY-RUN: Would automerge branch %s", config.branch_name)
            else:
                await asyncio.to_thread(git.merge_branch, config.branch_name)
        except Exception as err:
            return classify_merge_error(err)
        logger.info("Branch automerged: %s", config.branch_name)
        return AutomergeResult.AUTOMERGED
    if branch_status == BranchStatus.RED:
        return AutomergeResult.BRANCH_STATUS_ERROR

    logger.debug('Branch status is "%s" - skipping automerge', branch_status.value)
    return AutomergeResult.NO_AUTOMERGE
