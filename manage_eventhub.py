#!/usr/bin/env python3
"""
Azure Event Hub management sample.

Usage:
  export AZURE_SUBSCRIPTION_ID=<subscription>
  python3 manage_eventhub.py
  python3 manage_eventhub.py --region westus2 --probe-listener
  python3 manage_eventhub.py --keep-resources --log-level DEBUG
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from logging_config import configure_logging
from azure_clients import create_management_clients
from config import ProvisioningConfig
from errors import ConfigurationError
from logger import ProvisioningLogger
from provisioner import EventHubProvisioner

logger = logging.getLogger("ManageEventHub")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an Event Hub namespace, capture storage, event hubs, "
                    "a consumer group and a Listen rule, then delete everything"
    )
    parser.add_argument("--region", help="Region for the resource group and namespace (default: eastus)")
    parser.add_argument("--storage-region", help="Region for the capture storage account (default: eastus2)")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Application log level (default: LOG_LEVEL or INFO)")
    parser.add_argument("--max-retries", type=int,
                        help="Extra attempts for retryable failures per step (default: 2)")
    parser.add_argument("--keep-resources", action="store_true", default=None,
                        help="Do not delete the resource group at the end")
    parser.add_argument("--probe-listener", action="store_true", default=None,
                        help="Connect with the Listen rule after creating it")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level or os.getenv('LOG_LEVEL', 'INFO'))

    try:
        config = ProvisioningConfig.from_env({
            "region": args.region,
            "storage_region": args.storage_region,
            "log_level": args.log_level,
            "max_retries": args.max_retries,
            "keep_resources": args.keep_resources,
            "probe_listener": args.probe_listener,
        })
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    structured = ProvisioningLogger(logging.getLogger("ProvisioningLogger"))

    clients = None
    try:
        clients = create_management_clients(config.subscription_id)
        provisioner = EventHubProvisioner(clients, config, structured_logger=structured)
        provisioner.run()
        logger.info("Event Hub sample completed")
        return 0
    except Exception as e:
        logger.error(f"Event Hub sample failed: {e}", exc_info=True)
        structured.log_error(type(e).__name__, str(e), {"names": config.describe()})
        return 1
    finally:
        if clients is not None:
            clients.close()


if __name__ == "__main__":
    sys.exit(main())
