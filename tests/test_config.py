import re

import pytest

from config import (
    DEFAULT_REGION,
    DEFAULT_STORAGE_REGION,
    ProvisioningConfig,
    create_random_name,
)
from errors import ConfigurationError


ENV_VARS = [
    "AZURE_SUBSCRIPTION_ID",
    "EVENTHUB_SAMPLE_REGION",
    "EVENTHUB_SAMPLE_STORAGE_REGION",
    "EVENTHUB_SAMPLE_MAX_RETRIES",
    "EVENTHUB_SAMPLE_KEEP_RESOURCES",
    "EVENTHUB_SAMPLE_PROBE_LISTENER",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_random_names_are_valid_storage_names():
    name = create_random_name("stg")

    assert name.startswith("stg")
    assert re.fullmatch(r"[a-z0-9]{3,24}", name)


def test_random_names_differ():
    assert create_random_name("eh") != create_random_name("eh")


def test_random_name_respects_max_length():
    assert len(create_random_name("averyverylongprefixforstorage")) == 24


@pytest.mark.parametrize("prefix", ["", "rg-eh", "ns_1"])
def test_random_name_rejects_bad_prefix(prefix):
    with pytest.raises(ConfigurationError):
        create_random_name(prefix)


def test_from_env_requires_subscription():
    with pytest.raises(ConfigurationError):
        ProvisioningConfig.from_env()


def test_from_env_defaults(monkeypatch):
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub")

    config = ProvisioningConfig.from_env()

    assert config.subscription_id == "sub"
    assert config.region == DEFAULT_REGION
    assert config.storage_region == DEFAULT_STORAGE_REGION
    assert config.max_retries == 2
    assert config.keep_resources is False
    assert config.probe_listener is False
    assert config.container_name == "testname"
    assert config.consumer_group_name == "cg1"
    assert config.authorization_rule_name == "listenrule1"
    assert config.resource_group_name.startswith("rgeh")
    assert config.eventhub_name_1 != config.eventhub_name_2


def test_from_env_reads_optional_settings(monkeypatch):
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub")
    monkeypatch.setenv("EVENTHUB_SAMPLE_REGION", "westeurope")
    monkeypatch.setenv("EVENTHUB_SAMPLE_MAX_RETRIES", "0")
    monkeypatch.setenv("EVENTHUB_SAMPLE_KEEP_RESOURCES", "true")

    config = ProvisioningConfig.from_env()

    assert config.region == "westeurope"
    assert config.max_retries == 0
    assert config.keep_resources is True


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub")
    monkeypatch.setenv("EVENTHUB_SAMPLE_REGION", "westeurope")

    config = ProvisioningConfig.from_env({"region": "northeurope", "storage_region": None})

    assert config.region == "northeurope"
    assert config.storage_region == DEFAULT_STORAGE_REGION


def test_invalid_retry_setting(monkeypatch):
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "sub")
    monkeypatch.setenv("EVENTHUB_SAMPLE_MAX_RETRIES", "lots")

    with pytest.raises(ConfigurationError):
        ProvisioningConfig.from_env()

    with pytest.raises(ConfigurationError):
        ProvisioningConfig(subscription_id="sub", max_retries=-1)


def test_describe_omits_subscription():
    config = ProvisioningConfig(subscription_id="secret-sub")

    described = config.describe()

    assert "secret-sub" not in str(described)
    assert described["container"] == "testname"
