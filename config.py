"""
Run configuration for the Event Hub provisioning sample.

Values come from environment variables first and may be overridden by
command line flags (see ``manage_eventhub.py``). Resource names are
generated once per run so every step refers to the same names.
"""

import os
import uuid
from dataclasses import dataclass, field
from typing import Optional

from errors import ConfigurationError


DEFAULT_REGION = "eastus"
DEFAULT_STORAGE_REGION = "eastus2"

CAPTURE_ENCODING = "Avro"
CAPTURE_DESTINATION_NAME = "EventHubArchive.AzureBlockBlob"

# Storage account names: 3-24 chars, lowercase letters and digits only
STORAGE_ACCOUNT_NAME_MAX = 24
RANDOM_SUFFIX_LENGTH = 8


def create_random_name(prefix: str, max_length: int = STORAGE_ACCOUNT_NAME_MAX) -> str:
    """Return ``prefix`` followed by a random lowercase hex suffix."""
    if not prefix or not prefix.isalnum():
        raise ConfigurationError(f"Name prefix must be alphanumeric: {prefix!r}")

    name = f"{prefix.lower()}{uuid.uuid4().hex[:RANDOM_SUFFIX_LENGTH]}"
    return name[:max_length]


def _env_flag(name: str) -> bool:
    return os.getenv(name, '').strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


@dataclass
class ProvisioningConfig:
    """Everything one provisioning run needs to know"""
    subscription_id: str
    region: str = DEFAULT_REGION
    storage_region: str = DEFAULT_STORAGE_REGION

    resource_group_name: str = field(default_factory=lambda: create_random_name("rgeh"))
    namespace_name: str = field(default_factory=lambda: create_random_name("ns"))
    storage_account_name: str = field(default_factory=lambda: create_random_name("stg"))
    eventhub_name_1: str = field(default_factory=lambda: create_random_name("eh"))
    eventhub_name_2: str = field(default_factory=lambda: create_random_name("eh"))

    container_name: str = "testname"
    consumer_group_name: str = "cg1"
    consumer_group_metadata: str = "sometadata"
    authorization_rule_name: str = "listenrule1"
    authorization_rule_rights: tuple = ("Listen",)

    capture_encoding: str = CAPTURE_ENCODING
    capture_destination_name: str = CAPTURE_DESTINATION_NAME

    max_retries: int = 2
    retry_backoff_seconds: float = 5.0
    keep_resources: bool = False
    probe_listener: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.subscription_id:
            raise ConfigurationError("AZURE_SUBSCRIPTION_ID must be set")
        if self.max_retries < 0:
            raise ConfigurationError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_backoff_seconds < 0:
            raise ConfigurationError("retry_backoff_seconds must be >= 0")
        if self.eventhub_name_1 == self.eventhub_name_2:
            raise ConfigurationError("The two event hubs need distinct names")
        if len(self.storage_account_name) > STORAGE_ACCOUNT_NAME_MAX:
            raise ConfigurationError(
                f"Storage account name '{self.storage_account_name}' is longer than "
                f"{STORAGE_ACCOUNT_NAME_MAX} characters"
            )

    @classmethod
    def from_env(cls, overrides: Optional[dict] = None) -> "ProvisioningConfig":
        """
        Build a config from environment variables

        Recognized variables:
        - AZURE_SUBSCRIPTION_ID (required)
        - EVENTHUB_SAMPLE_REGION
        - EVENTHUB_SAMPLE_STORAGE_REGION
        - EVENTHUB_SAMPLE_MAX_RETRIES
        - EVENTHUB_SAMPLE_KEEP_RESOURCES
        - EVENTHUB_SAMPLE_PROBE_LISTENER
        - LOG_LEVEL

        Args:
            overrides: Values that win over the environment (None values are ignored)
        """
        values = {
            "subscription_id": os.getenv('AZURE_SUBSCRIPTION_ID', ''),
            "region": os.getenv('EVENTHUB_SAMPLE_REGION', DEFAULT_REGION),
            "storage_region": os.getenv('EVENTHUB_SAMPLE_STORAGE_REGION', DEFAULT_STORAGE_REGION),
            "max_retries": _env_int('EVENTHUB_SAMPLE_MAX_RETRIES', 2),
            "keep_resources": _env_flag('EVENTHUB_SAMPLE_KEEP_RESOURCES'),
            "probe_listener": _env_flag('EVENTHUB_SAMPLE_PROBE_LISTENER'),
            "log_level": os.getenv('LOG_LEVEL', 'INFO'),
        }

        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        return cls(**values)

    def describe(self) -> dict:
        """Names used by this run, without the subscription id"""
        return {
            "region": self.region,
            "storageRegion": self.storage_region,
            "resourceGroup": self.resource_group_name,
            "namespace": self.namespace_name,
            "storageAccount": self.storage_account_name,
            "container": self.container_name,
            "eventHubs": [self.eventhub_name_1, self.eventhub_name_2],
        }
