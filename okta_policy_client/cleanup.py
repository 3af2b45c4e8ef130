"""
Remove policies left behind by interrupted integration runs.

Integration scenarios name every policy they create with a fixed prefix
(TEST_RESOURCE_PREFIX). When a run is killed between create and delete, those
policies stay in the org; this module finds them by prefix and removes them
using the same deactivate-then-delete order the API requires.
"""

import argparse
import asyncio
import sys
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from okta_policy_client.core.okta.client import OktaClient, create_client
from okta_policy_client.core.okta.models import LifecycleStatus, PolicyType
from okta_policy_client.utils.error_handling import BaseError, OktaApiError, format_error_for_user
from okta_policy_client.utils.logging import generate_correlation_id, get_logger, set_correlation_id

logger = get_logger(__name__)


@dataclass
class CleanupReport:
    """Outcome of a cleanup run."""
    # Ids deleted, or that would be deleted in dry-run mode
    removed: List[str] = field(default_factory=list)
    # Policy id (or policy type, when listing failed) -> user-facing error
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


async def cleanup_policies(client: OktaClient,
                           prefix: str,
                           policy_types: Optional[Iterable[PolicyType]] = None,
                           dry_run: bool = False) -> CleanupReport:
    """
    Deactivate and delete every non-system policy whose name starts with ``prefix``.

    A failure on one policy (or on listing one type) is recorded in the report
    and the run moves on to the rest.

    Args:
        client: Client for the target org
        prefix: Name prefix identifying test-created policies
        policy_types: Types to scan, all supported types by default
        dry_run: Only report what would be deleted

    Returns:
        CleanupReport with the removed ids and the failures
    """
    if not prefix:
        raise ValueError("A non-empty prefix is required")

    report = CleanupReport()
    for policy_type in policy_types or list(PolicyType):
        policy_type = PolicyType(policy_type)
        # Collect first so deletions don't shift the pages being read
        try:
            matches = [
                policy async for policy in client.policies.list_policies(policy_type)
                if policy.name.startswith(prefix) and not policy.system
            ]
        except OktaApiError as e:
            logger.warning(f"Could not list {policy_type.value} policies: {format_error_for_user(e)}")
            report.failed[policy_type.value] = format_error_for_user(e)
            continue
        logger.info(f"Found {len(matches)} {policy_type.value} policies matching '{prefix}'")

        for policy in matches:
            if dry_run:
                logger.info(f"[dry-run] Would delete {policy.type} policy {policy.id} ({policy.name})")
                report.removed.append(policy.id)
                continue

            try:
                if policy.status != LifecycleStatus.INACTIVE:
                    await client.policies.deactivate_policy(policy.id)
                await client.policies.delete_policy(policy.id)
            except OktaApiError as e:
                logger.warning(f"Could not delete policy {policy.id}: {format_error_for_user(e)}")
                report.failed[policy.id] = format_error_for_user(e)
                continue
            report.removed.append(policy.id)

    return report


async def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Delete policies left over from integration test runs")
    parser.add_argument(
        "--prefix",
        default=None,
        help="Policy name prefix (default: TEST_RESOURCE_PREFIX setting)",
    )
    parser.add_argument(
        "--type",
        dest="policy_types",
        action="append",
        choices=[policy_type.value for policy_type in PolicyType],
        help="Policy type to scan; repeat for several (default: all)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List matching policies without deleting them",
    )
    args = parser.parse_args(argv)

    set_correlation_id(generate_correlation_id("cleanup"))

    try:
        client = create_client()
    except BaseError as e:
        print(f"Error: {format_error_for_user(e)}", file=sys.stderr)
        return 2

    prefix = args.prefix or client.settings.TEST_RESOURCE_PREFIX
    policy_types = [PolicyType(value) for value in args.policy_types] if args.policy_types else None

    report = await cleanup_policies(client, prefix, policy_types, dry_run=args.dry_run)

    verb = "Would delete" if args.dry_run else "Deleted"
    print(f"{verb} {len(report.removed)} policies")
    for policy_id in report.removed:
        print(f"  {policy_id}")

    if not report.ok:
        print(f"Failed on {len(report.failed)}:", file=sys.stderr)
        for key, message in report.failed.items():
            print(f"  {key}: {message}", file=sys.stderr)
        return 1
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
