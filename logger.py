import logging
import json
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ProvisioningLogger:
    """Structured logger for provisioning activity"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def log_resource_created(self, kind: str, name: str, resource_id: Optional[str]):
        """Log a resource that reached a terminal succeeded state"""
        log_entry = {
            "eventType": "ResourceCreated",
            "timestamp": _utc_now(),
            "kind": kind,
            "name": name,
            "resourceId": resource_id
        }

        self.logger.info(f"Resource Created: {json.dumps(log_entry, default=str)}")
        return log_entry

    def log_listing(self, kind: str, parent: str, names: List[str]):
        """Log the result of a list operation"""
        listing = {
            "eventType": "ResourceListing",
            "timestamp": _utc_now(),
            "kind": kind,
            "parent": parent,
            "count": len(names),
            "names": names
        }

        self.logger.info(f"Resource Listing: {json.dumps(listing, default=str)}")
        return listing

    def log_cleanup(self, resource_group_id: str, status: str, error: Optional[str] = None):
        """Log the outcome of resource group deletion"""
        cleanup = {
            "eventType": "ResourceGroupCleanup",
            "timestamp": _utc_now(),
            "resourceGroupId": resource_group_id,
            "status": status,
            "error": error
        }

        if error:
            self.logger.error(f"Resource Group Cleanup: {json.dumps(cleanup, default=str)}")
        else:
            self.logger.info(f"Resource Group Cleanup: {json.dumps(cleanup, default=str)}")
        return cleanup

    def log_run_summary(self, report: Dict[str, Any]):
        """Log summary of an entire provisioning run"""
        summary = {
            "eventType": "ProvisioningRunSummary",
            "timestamp": _utc_now(),
            **report
        }

        self.logger.info(f"Provisioning Run Summary: {json.dumps(summary, default=str)}")
        return summary

    def log_error(self, error_type: str, error_message: str, context: Dict[str, Any] = None):
        """Log error with context"""
        error_log = {
            "eventType": "Error",
            "timestamp": _utc_now(),
            "errorType": error_type,
            "errorMessage": error_message,
            "context": context or {}
        }

        self.logger.error(f"Error: {json.dumps(error_log, default=str)}")
        return error_log
