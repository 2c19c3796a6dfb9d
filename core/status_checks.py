"""Branch status resolution."""

import logging

from .models import BranchStatus
from .platform import Platform

logger = logging.getLogger(__name__)


async def resolve_branch_status(
    branch_name: str, ignore_tests: bool, platform: Platform
) -> BranchStatus:
    """Return the branch CI status, or green when tests are ignored."""
    logger.debug("Checking branch status for %s (ignore_tests=%s)", branch_name, ignore_tests)
    if ignore_tests:
        logger.debug("Ignore tests. Return green")
        return BranchStatus.GREEN

    status = await platform.get_branch_status(branch_name)
    logger.debug("Branch status for %s: %s", branch_name, status.value)
    return status
