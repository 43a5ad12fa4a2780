from azure.identity import ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.eventhub import EventHubManagementClient
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
import os
import logging
from dataclasses import dataclass
from typing import Any

# Configure logger
logger = logging.getLogger("AzureClients")


@dataclass
class ManagementClients:
    """The three ARM clients a provisioning run talks to, sharing one credential"""
    subscription_id: str
    resource: ResourceManagementClient
    eventhub: EventHubManagementClient
    storage: StorageManagementClient

    def close(self):
        """Close the underlying HTTP pipelines"""
        for client in (self.resource, self.eventhub, self.storage):
            try:
                client.close()
            except Exception as e:
                logger.warning(f"Error closing management client: {e}")


def create_credential() -> Any:
    """
    Resolve the credential for management calls

    Uses a service principal when AZURE_CLIENT_ID, AZURE_CLIENT_SECRET and
    AZURE_TENANT_ID are all set, otherwise falls back to the default
    credential chain (environment, managed identity, Azure CLI, ...).
    """
    client_id = os.getenv('AZURE_CLIENT_ID')
    client_secret = os.getenv('AZURE_CLIENT_SECRET')
    tenant_id = os.getenv('AZURE_TENANT_ID')

    if all([client_id, client_secret, tenant_id]):
        logger.info("Using ClientSecretCredential from environment variables")
        return ClientSecretCredential(
            tenant_id=tenant_id,
            client_id=client_id,
            client_secret=client_secret
        )

    logger.info("Service principal variables not set, using DefaultAzureCredential")
    return DefaultAzureCredential()


def create_management_clients(subscription_id: str, credential: Any = None) -> ManagementClients:
    """
    Create the resource, Event Hub and storage management clients

    Args:
        subscription_id: Target Azure subscription
        credential: Optional credential, resolved with create_credential() when omitted
    """
    if credential is None:
        credential = create_credential()

    clients = ManagementClients(
        subscription_id=subscription_id,
        resource=ResourceManagementClient(credential, subscription_id),
        eventhub=EventHubManagementClient(credential=credential, subscription_id=subscription_id),
        storage=StorageManagementClient(credential, subscription_id),
    )
    logger.info("Management clients initialized")
    return clients
