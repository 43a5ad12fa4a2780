import logging

import pytest
from unittest.mock import MagicMock

from provisioning_report import (
    CLEANUP_DELETED,
    CLEANUP_FAILED,
    CLEANUP_NOT_ATTEMPTED,
    ProvisioningReport,
)
from resource_group_scope import resource_group_scope


@pytest.fixture
def fake_provisioner():
    provisioner = MagicMock()
    provisioner.config.keep_resources = False
    provisioner.create_resource_group.return_value = MagicMock(id="/subscriptions/s/resourceGroups/rg")
    return provisioner


def test_releases_after_normal_exit(fake_provisioner, structured):
    report = ProvisioningReport()

    with resource_group_scope(fake_provisioner, report, structured) as resource_group:
        assert resource_group.id == "/subscriptions/s/resourceGroups/rg"
        fake_provisioner.delete_resource_group.assert_not_called()

    fake_provisioner.delete_resource_group.assert_called_once_with()
    assert report.cleanup_status == CLEANUP_DELETED


def test_releases_and_reraises_on_body_error(fake_provisioner, structured):
    report = ProvisioningReport()

    with pytest.raises(RuntimeError, match="body failed"):
        with resource_group_scope(fake_provisioner, report, structured):
            raise RuntimeError("body failed")

    fake_provisioner.delete_resource_group.assert_called_once_with()


def test_releases_on_keyboard_interrupt(fake_provisioner, structured):
    report = ProvisioningReport()

    with pytest.raises(KeyboardInterrupt):
        with resource_group_scope(fake_provisioner, report, structured):
            raise KeyboardInterrupt

    fake_provisioner.delete_resource_group.assert_called_once_with()


def test_release_failure_keeps_original_error(fake_provisioner, structured, caplog):
    caplog.set_level(logging.INFO)
    fake_provisioner.delete_resource_group.side_effect = RuntimeError("delete failed")
    report = ProvisioningReport()

    with pytest.raises(ValueError, match="original"):
        with resource_group_scope(fake_provisioner, report, structured):
            raise ValueError("original")

    assert report.cleanup_status == CLEANUP_FAILED
    assert report.cleanup_error == "delete failed"
    assert "Failed to delete Resource Group" in caplog.text


def test_no_release_without_resource_id(fake_provisioner, structured):
    fake_provisioner.create_resource_group.return_value = MagicMock(id=None)
    report = ProvisioningReport()

    with resource_group_scope(fake_provisioner, report, structured):
        pass

    fake_provisioner.delete_resource_group.assert_not_called()
    assert report.cleanup_status == CLEANUP_NOT_ATTEMPTED


def test_no_release_when_creation_fails(fake_provisioner, structured):
    fake_provisioner.create_resource_group.side_effect = RuntimeError("quota")
    report = ProvisioningReport()
    body = MagicMock()

    with pytest.raises(RuntimeError, match="quota"):
        with resource_group_scope(fake_provisioner, report, structured):
            body()

    body.assert_not_called()
    fake_provisioner.delete_resource_group.assert_not_called()
