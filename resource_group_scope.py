"""
Acquire a resource group, run a body inside it, always release it.

Deleting the resource group removes everything nested in it, so this is the
only cleanup a run needs. Release runs on every exit path; a failed release
is logged and recorded on the report, never raised, so it cannot hide the
error that ended the body.
"""

import logging
from contextlib import contextmanager

from logger import ProvisioningLogger
from provisioning_report import (
    CLEANUP_DELETED,
    CLEANUP_FAILED,
    CLEANUP_KEPT,
    ProvisioningReport,
)

logger = logging.getLogger("ResourceGroupScope")


def release_resource_group(provisioner, report: ProvisioningReport, structured: ProvisioningLogger):
    """Delete the run's resource group unless the config asks to keep it"""
    resource_group_id = report.resource_group_id

    if provisioner.config.keep_resources:
        logger.warning(f"Keeping Resource Group: {resource_group_id} (delete it manually when done)")
        report.cleanup_status = CLEANUP_KEPT
        structured.log_cleanup(resource_group_id, CLEANUP_KEPT)
        return

    try:
        logger.info(f"Deleting Resource Group: {resource_group_id}")
        provisioner.delete_resource_group()
        logger.info(f"Deleted Resource Group: {resource_group_id}")
        report.cleanup_status = CLEANUP_DELETED
        structured.log_cleanup(resource_group_id, CLEANUP_DELETED)
    except Exception as e:
        logger.error(f"Failed to delete Resource Group {resource_group_id}: {e}", exc_info=True)
        report.cleanup_status = CLEANUP_FAILED
        report.cleanup_error = str(e)
        structured.log_cleanup(resource_group_id, CLEANUP_FAILED, error=str(e))


@contextmanager
def resource_group_scope(provisioner, report: ProvisioningReport, structured: ProvisioningLogger):
    """
    Create the run's resource group and guarantee its deletion

    Deletion is attempted only when creation returned a resource id. If
    creation itself fails the error propagates and nothing is deleted.

    Args:
        provisioner: Object exposing ``config``, ``create_resource_group()``
            and ``delete_resource_group()``
        report: Receives the resource group id and cleanup outcome
        structured: Structured event logger

    Yields:
        The created resource group model
    """
    try:
        resource_group = provisioner.create_resource_group()
        report.resource_group_id = getattr(resource_group, 'id', None)
        yield resource_group
    finally:
        if report.resource_group_id:
            release_resource_group(provisioner, report, structured)
        else:
            logger.info("No resource group was created, nothing to clean up")
