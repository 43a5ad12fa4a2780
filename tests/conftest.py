import os

os.environ.setdefault("SKIP_AUTO_LOG_CONFIG", "1")

import pytest
from unittest.mock import MagicMock

from azure_clients import ManagementClients
from config import ProvisioningConfig
from logger import ProvisioningLogger
from provisioner import EventHubProvisioner


SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000000"
RG_ID = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/rgehtest"
NAMESPACE_ID = f"{RG_ID}/providers/Microsoft.EventHub/namespaces/nstest"
STORAGE_ID = f"{RG_ID}/providers/Microsoft.Storage/storageAccounts/stgtest"


def named(name, **attrs):
    """MagicMock with a real ``name`` attribute (the constructor kwarg names the mock itself)"""
    resource = MagicMock(**attrs)
    resource.name = name
    return resource


@pytest.fixture
def config():
    return ProvisioningConfig(
        subscription_id=SUBSCRIPTION_ID,
        resource_group_name="rgehtest",
        namespace_name="nstest",
        storage_account_name="stgtest",
        eventhub_name_1="ehone",
        eventhub_name_2="ehtwo",
        retry_backoff_seconds=0,
    )


@pytest.fixture
def manager():
    """
    Parent mock for all three management clients

    Child mocks report their calls to the parent, so ``manager.mock_calls``
    is the global order of remote calls.
    """
    manager = MagicMock()

    manager.resource.resource_groups.create_or_update.return_value = MagicMock(id=RG_ID)
    manager.eventhub.namespaces.begin_create_or_update.return_value.result.return_value = MagicMock(id=NAMESPACE_ID)
    manager.storage.storage_accounts.begin_create.return_value.result.return_value = MagicMock(id=STORAGE_ID)
    manager.storage.blob_containers.create.return_value = MagicMock(id=f"{STORAGE_ID}/blobServices/default/containers/testname")

    def create_eventhub(resource_group, namespace, name, parameters):
        return MagicMock(id=f"{NAMESPACE_ID}/eventhubs/{name}")

    manager.eventhub.event_hubs.create_or_update.side_effect = create_eventhub
    manager.eventhub.consumer_groups.list_by_event_hub.return_value = iter([named("$Default"), named("cg1")])
    manager.eventhub.event_hubs.list_by_namespace.return_value = iter([named("ehone"), named("ehtwo")])
    return manager


@pytest.fixture
def clients(manager):
    return ManagementClients(
        subscription_id=SUBSCRIPTION_ID,
        resource=manager.resource,
        eventhub=manager.eventhub,
        storage=manager.storage,
    )


@pytest.fixture
def structured():
    return MagicMock(spec=ProvisioningLogger)


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def provisioner(clients, config, structured, sleep):
    return EventHubProvisioner(clients, config, structured_logger=structured, sleep=sleep)
