"""
Event Hub provisioning sample

Walks through managing Event Hubs with the Azure management SDKs:
  - Create a resource group and an Event Hub namespace
  - Create a storage account and blob container to receive captured events
  - Create an event hub with data capture enabled, a consumer group and a Listen rule
  - List consumer groups in the event hub
  - Create a second event hub in the namespace and list all event hubs
  - Delete the resource group (always attempted once it exists)

Every create call blocks until the long-running operation finishes.
"""

import logging
import time
from typing import Any, Callable, List, Optional

from azure.mgmt.eventhub.models import (
    AuthorizationRule,
    CaptureDescription,
    ConsumerGroup,
    Destination,
    EHNamespace,
    Eventhub,
)
from azure.mgmt.resource.resources.models import ResourceGroup
from azure.mgmt.storage.models import BlobContainer, Sku, StorageAccountCreateParameters

from azure_clients import ManagementClients
from config import ProvisioningConfig
from errors import run_step
from listener_probe import probe_with_listen_rule
from logger import ProvisioningLogger
from provisioning_report import ProvisioningReport
from resource_group_scope import resource_group_scope

logger = logging.getLogger("EventHubProvisioner")


def build_capture_description(config: ProvisioningConfig, storage_account_id: str) -> CaptureDescription:
    """Capture settings pointing at the storage account and container of this run"""
    return CaptureDescription(
        enabled=True,
        encoding=config.capture_encoding,
        destination=Destination(
            name=config.capture_destination_name,
            storage_account_resource_id=storage_account_id,
            blob_container=config.container_name
        )
    )


class EventHubProvisioner:
    """Creates the sample's resource graph in order and tears it down"""

    def __init__(self,
                 clients: ManagementClients,
                 config: ProvisioningConfig,
                 structured_logger: Optional[ProvisioningLogger] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.clients = clients
        self.config = config
        self.structured = structured_logger or ProvisioningLogger(logging.getLogger("ProvisioningLogger"))
        self.report = ProvisioningReport(names=config.describe())
        self._sleep = sleep

    def _step(self, name: str, operation: Callable[[], Any]) -> Any:
        return run_step(
            name,
            operation,
            max_retries=self.config.max_retries,
            backoff_seconds=self.config.retry_backoff_seconds,
            sleep=self._sleep
        )

    def _record(self, kind: str, name: str, resource: Any) -> Any:
        resource_id = getattr(resource, 'id', None)
        self.report.add(kind, name, resource_id)
        self.structured.log_resource_created(kind, name, resource_id)
        return resource

    # ------------------------------------------------------------------
    # Resource group
    # ------------------------------------------------------------------

    def create_resource_group(self):
        name = self.config.resource_group_name
        logger.info(f"Creating a resource group: {name}")

        resource_group = self._step(
            "create resource group",
            lambda: self.clients.resource.resource_groups.create_or_update(
                name, ResourceGroup(location=self.config.region)
            )
        )

        logger.info(f"Created a resource group with Id: {resource_group.id}")
        return self._record("ResourceGroup", name, resource_group)

    def delete_resource_group(self):
        # Single attempt: a failed cleanup is reported, not retried
        poller = self.clients.resource.resource_groups.begin_delete(self.config.resource_group_name)
        poller.result()

    # ------------------------------------------------------------------
    # Namespace and capture storage
    # ------------------------------------------------------------------

    def create_namespace(self):
        cfg = self.config
        logger.info("Creating a namespace")

        namespace = self._step(
            "create namespace",
            lambda: self.clients.eventhub.namespaces.begin_create_or_update(
                cfg.resource_group_name,
                cfg.namespace_name,
                EHNamespace(location=cfg.region)
            ).result()
        )

        logger.info(f"Created a namespace with Id: {namespace.id}")
        return self._record("Namespace", cfg.namespace_name, namespace)

    def create_capture_storage(self):
        """Create the storage account and blob container that receive captured events"""
        cfg = self.config
        storage = self.clients.storage

        logger.info(f"Creating a storage account: {cfg.storage_account_name}")
        account = self._step(
            "create storage account",
            lambda: storage.storage_accounts.begin_create(
                cfg.resource_group_name,
                cfg.storage_account_name,
                StorageAccountCreateParameters(
                    sku=Sku(name="Standard_LRS"),
                    kind="StorageV2",
                    location=cfg.storage_region
                )
            ).result()
        )
        self._record("StorageAccount", cfg.storage_account_name, account)

        self._step(
            "get blob service",
            lambda: storage.blob_services.get_service_properties(
                cfg.resource_group_name, cfg.storage_account_name
            )
        )

        container = self._step(
            "create blob container",
            lambda: storage.blob_containers.create(
                cfg.resource_group_name,
                cfg.storage_account_name,
                cfg.container_name,
                BlobContainer()
            )
        )
        self._record("BlobContainer", cfg.container_name, container)

        return account, container

    # ------------------------------------------------------------------
    # Event hubs, consumer groups, rules
    # ------------------------------------------------------------------

    def create_eventhub(self, name: str, capture: Optional[CaptureDescription] = None):
        cfg = self.config
        if capture is not None:
            logger.info("Creating an event hub with data capture enabled")

        eventhub = self._step(
            f"create event hub {name}",
            lambda: self.clients.eventhub.event_hubs.create_or_update(
                cfg.resource_group_name,
                cfg.namespace_name,
                name,
                Eventhub(capture_description=capture)
            )
        )

        logger.info(f"Created an event hub with Id: {eventhub.id}")
        return self._record("EventHub", name, eventhub)

    def create_consumer_group(self):
        cfg = self.config

        consumer_group = self._step(
            "create consumer group",
            lambda: self.clients.eventhub.consumer_groups.create_or_update(
                cfg.resource_group_name,
                cfg.namespace_name,
                cfg.eventhub_name_1,
                cfg.consumer_group_name,
                ConsumerGroup(user_metadata=cfg.consumer_group_metadata)
            )
        )

        return self._record("ConsumerGroup", cfg.consumer_group_name, consumer_group)

    def create_authorization_rule(self):
        cfg = self.config

        rule = self._step(
            "create authorization rule",
            lambda: self.clients.eventhub.event_hubs.create_or_update_authorization_rule(
                cfg.resource_group_name,
                cfg.namespace_name,
                cfg.eventhub_name_1,
                cfg.authorization_rule_name,
                AuthorizationRule(rights=list(cfg.authorization_rule_rights))
            )
        )

        return self._record("AuthorizationRule", cfg.authorization_rule_name, rule)

    def list_consumer_groups(self) -> List[str]:
        cfg = self.config
        logger.info("Retrieving consumer groups")

        names = self._step(
            "list consumer groups",
            lambda: [
                cg.name for cg in self.clients.eventhub.consumer_groups.list_by_event_hub(
                    resource_group_name=cfg.resource_group_name,
                    namespace_name=cfg.namespace_name,
                    event_hub_name=cfg.eventhub_name_1
                )
            ]
        )

        logger.info("Retrieved consumer groups")
        for name in names:
            logger.info(name)

        self.report.consumer_groups = names
        self.structured.log_listing("ConsumerGroup", cfg.eventhub_name_1, names)
        return names

    def list_eventhubs(self) -> List[str]:
        cfg = self.config

        names = self._step(
            "list event hubs",
            lambda: [
                eh.name for eh in self.clients.eventhub.event_hubs.list_by_namespace(
                    resource_group_name=cfg.resource_group_name,
                    namespace_name=cfg.namespace_name
                )
            ]
        )

        for name in names:
            logger.info(name)

        self.report.eventhubs = names
        self.structured.log_listing("EventHub", cfg.namespace_name, names)
        return names

    def probe_listener(self):
        cfg = self.config
        self.report.probe_partition_ids = probe_with_listen_rule(
            self.clients,
            cfg.resource_group_name,
            cfg.namespace_name,
            cfg.eventhub_name_1,
            cfg.authorization_rule_name
        )

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------

    def provision(self):
        """Creation sequence, run inside the resource group scope"""
        cfg = self.config

        self.create_namespace()

        account, _container = self.create_capture_storage()

        capture = build_capture_description(cfg, account.id)
        self.create_eventhub(cfg.eventhub_name_1, capture=capture)

        self.create_consumer_group()
        self.create_authorization_rule()

        if cfg.probe_listener:
            self.probe_listener()

        self.list_consumer_groups()

        logger.info("Creating a second event hub in same namespace")
        self.create_eventhub(cfg.eventhub_name_2)

        self.list_eventhubs()

    def run(self) -> ProvisioningReport:
        """
        Provision everything, then always attempt to delete the resource group

        Raises:
            ProvisioningStepError: the first step that failed; cleanup has
                already been attempted by the time it propagates
        """
        self.report = ProvisioningReport(names=self.config.describe())
        start_time = time.time()
        try:
            with resource_group_scope(self, self.report, self.structured):
                self.provision()
        except Exception as e:
            self.report.error = str(e)
            raise
        finally:
            self.report.elapsed_seconds = round(time.time() - start_time, 2)
            self.structured.log_run_summary(self.report.to_dict())

        return self.report


def run_sample(clients: ManagementClients, config: ProvisioningConfig) -> ProvisioningReport:
    """Run the whole sample against already configured clients"""
    return EventHubProvisioner(clients, config).run()
