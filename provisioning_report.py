"""
Records of what a provisioning run created, listed and cleaned up.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


CLEANUP_NOT_ATTEMPTED = "not_attempted"
CLEANUP_DELETED = "deleted"
CLEANUP_FAILED = "failed"
CLEANUP_KEPT = "kept"


@dataclass
class ProvisionedResource:
    """One remote resource that reached a succeeded state"""
    kind: str
    name: str
    resource_id: Optional[str]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ProvisioningReport:
    """Outcome of one provisioning run"""
    names: Dict[str, Any] = field(default_factory=dict)
    resources: List[ProvisionedResource] = field(default_factory=list)
    consumer_groups: List[str] = field(default_factory=list)
    eventhubs: List[str] = field(default_factory=list)
    resource_group_id: Optional[str] = None
    cleanup_status: str = CLEANUP_NOT_ATTEMPTED
    cleanup_error: Optional[str] = None
    probe_partition_ids: Optional[List[str]] = None
    error: Optional[str] = None
    elapsed_seconds: Optional[float] = None

    def add(self, kind: str, name: str, resource_id: Optional[str]) -> ProvisionedResource:
        resource = ProvisionedResource(kind=kind, name=name, resource_id=resource_id)
        self.resources.append(resource)
        return resource

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "names": self.names,
            "resources": [asdict(r) for r in self.resources],
            "consumerGroups": self.consumer_groups,
            "eventHubs": self.eventhubs,
            "resourceGroupId": self.resource_group_id,
            "cleanupStatus": self.cleanup_status,
            "cleanupError": self.cleanup_error,
            "probePartitionIds": self.probe_partition_ids,
            "error": self.error,
            "elapsedSeconds": self.elapsed_seconds,
            "succeeded": self.succeeded,
        }
