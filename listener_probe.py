import logging
from typing import List, Optional
from azure.eventhub import EventHubConsumerClient

logger = logging.getLogger("ListenerProbe")


def probe_with_listen_rule(clients, resource_group: str, namespace: str,
                           eventhub_name: str, rule_name: str) -> Optional[List[str]]:
    """
    Check that the Listen rule actually grants data-plane access

    Fetches the rule's keys through the management API, connects with the
    primary connection string on the $Default consumer group and reads the
    partition ids.

    Returns:
        List of partition ids, or None if the probe failed
    """
    try:
        keys = clients.eventhub.event_hubs.list_keys(
            resource_group_name=resource_group,
            namespace_name=namespace,
            event_hub_name=eventhub_name,
            authorization_rule_name=rule_name
        )

        client = EventHubConsumerClient.from_connection_string(
            conn_str=keys.primary_connection_string,
            consumer_group="$Default",
            eventhub_name=eventhub_name
        )
        try:
            partition_ids = list(client.get_partition_ids())
        finally:
            client.close()

        logger.info(f"✓ Listen rule '{rule_name}' can read Event Hub: {eventhub_name} "
                    f"with {len(partition_ids)} partitions")
        return partition_ids

    except Exception as e:
        logger.warning(f"✗ Listen rule '{rule_name}' probe failed for '{eventhub_name}': {e}")
        return None
