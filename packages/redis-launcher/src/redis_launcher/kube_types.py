"""
Kubernetes API Pydantic response types.

This module provides Pydantic models for the subset of the Pod list response
the launcher reads. Internal types (Instance, Role, ...) are dataclasses in
launcher_protocols.types.

Notes:
- Container state is an object with exactly one of running/waiting/terminated
- creationTimestamp is RFC 3339 with a trailing "Z"
- podIP is absent until the pod is scheduled and networked
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PodMetadata(BaseModel):
    """Pod object metadata."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    creation_timestamp: datetime = Field(alias="creationTimestamp")
    labels: dict[str, str] = Field(default_factory=dict)


class ContainerState(BaseModel):
    """
    Container state from a container status entry.

    Exactly one key is set by the API server.
    """

    running: dict[str, Any] | None = None
    waiting: dict[str, Any] | None = None
    terminated: dict[str, Any] | None = None


class ContainerStatus(BaseModel):
    """Single container status entry."""

    name: str = ""
    state: ContainerState = Field(default_factory=ContainerState)


class PodStatus(BaseModel):
    """Pod status."""

    model_config = ConfigDict(populate_by_name=True)

    phase: str = "Unknown"
    pod_ip: str | None = Field(default=None, alias="podIP")
    container_statuses: list[ContainerStatus] = Field(
        default_factory=list, alias="containerStatuses"
    )


class Pod(BaseModel):
    """Single pod item."""

    metadata: PodMetadata
    status: PodStatus = Field(default_factory=PodStatus)


class PodList(BaseModel):
    """
    Response from GET /api/v1/namespaces/{namespace}/pods.

    Example response:
    {
        "kind": "PodList",
        "items": [
            {
                "metadata": {
                    "name": "redis-ha-server-0",
                    "creationTimestamp": "2026-01-26T12:00:00Z",
                    "labels": {"redis-node": "true", "redis-role": "master"}
                },
                "status": {
                    "phase": "Running",
                    "podIP": "10.0.0.5",
                    "containerStatuses": [{"name": "redis", "state": {"running": {}}}]
                }
            }
        ]
    }
    """

    items: list[Pod] = Field(default_factory=list)
