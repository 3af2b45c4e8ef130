#!/usr/bin/env python3
"""
Delete Okta policies left behind by interrupted integration test runs.

Usage:
    python scripts/cleanup_test_policies.py --dry-run
    python scripts/cleanup_test_policies.py --prefix "py-sdk:" --type PASSWORD

Reads OKTA_CLIENT_ORGURL and OKTA_API_TOKEN from the environment or .env.
"""

import asyncio
import sys
from pathlib import Path

# Setup project paths
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from okta_policy_client.cleanup import main


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
