"""
Kubernetes API client for pool membership and role labels.

This module provides the KubeRegistryClient class, the production
implementation of RegistryClientProtocol. It lists pods by label selector
and patches pod labels through the Kubernetes API server.

KubeRegistryClient receives an injected httpx.AsyncClient with base_url set
to the API server and the service account bearer token configured. HTTP and
validation failures are raised as RegistryError.

Kubernetes API Documentation:
- https://kubernetes.io/docs/reference/kubernetes-api/workload-resources/pod-v1/
"""

import logging
import ssl
from dataclasses import dataclass
from pathlib import Path

import httpx
from pydantic import ValidationError

from launcher_protocols import Identity, Instance, Liveness, Role
from redis_launcher.exceptions import RegistryError
from redis_launcher.kube_types import Pod, PodList

logger = logging.getLogger(__name__)

ROLE_LABEL = "redis-role"


@dataclass
class KubeRegistryClient:
    """
    Kubernetes registry client with injected httpx client.

    Converts Pod API objects to launcher_protocols Instance objects.

    Attributes:
        http: Pre-configured httpx.AsyncClient with base_url set to the API server.
        namespace: Namespace the pool lives in.

    Example:
        async with httpx.AsyncClient(base_url="https://kubernetes.default.svc") as http:
            client = KubeRegistryClient(http=http, namespace="redis")
            for pod in await client.list_instances("redis-role=master"):
                print(f"{pod.identity} at {pod.address}: {pod.liveness}")
    """

    http: httpx.AsyncClient
    namespace: str

    async def list_instances(self, selector: str) -> list[Instance]:
        """
        List pods matching a label selector.

        Calls GET /api/v1/namespaces/{namespace}/pods?labelSelector=...

        Args:
            selector: Label selector (e.g., "redis-node=true").

        Returns:
            List of Instance objects in API order.

        Raises:
            RegistryError: On HTTP errors or malformed response data.
        """
        try:
            response = await self.http.get(
                f"/api/v1/namespaces/{self.namespace}/pods",
                params={"labelSelector": selector},
            )
            response.raise_for_status()
            data = PodList.model_validate(response.json())
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            raise RegistryError("list pods", str(e)) from e

        return [self._instance_from_pod(pod) for pod in data.items]

    async def set_role_label(self, identity: Identity, role: Role) -> None:
        """
        Overwrite the role label on a pod.

        Raises:
            RegistryError: On HTTP errors.
        """
        await self.set_labels(identity, {ROLE_LABEL: role.value})

    async def set_labels(self, identity: Identity, labels: dict[str, str]) -> None:
        """
        Merge labels into a pod's metadata.

        Calls PATCH /api/v1/namespaces/{namespace}/pods/{identity} with a JSON
        merge patch, which overwrites existing values for the given keys.

        Raises:
            RegistryError: On HTTP errors.
        """
        try:
            response = await self.http.patch(
                f"/api/v1/namespaces/{self.namespace}/pods/{identity}",
                json={"metadata": {"labels": labels}},
                headers={"Content-Type": "application/merge-patch+json"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RegistryError("label pod", str(e)) from e

        logger.debug("Labelled pod %s with %s", identity, labels)

    @staticmethod
    def _instance_from_pod(pod: Pod) -> Instance:
        """Convert a Pod API object to an Instance."""
        return Instance(
            identity=pod.metadata.name,
            address=pod.status.pod_ip or "",
            role=Role.from_label(pod.metadata.labels.get(ROLE_LABEL)),
            created_at=pod.metadata.creation_timestamp,
            liveness=_liveness(pod),
        )


def _liveness(pod: Pod) -> Liveness:
    """
    Liveness from the first container's state.

    Matches the `.status.containerStatuses[0].state` check the pool has
    always used: a pod counts as running only once its container runs.
    """
    if pod.status.container_statuses:
        state = pod.status.container_statuses[0].state
        if state.running is not None:
            return Liveness.RUNNING
        if state.waiting is not None:
            return Liveness.PENDING
        return Liveness.UNKNOWN
    if pod.status.phase == "Pending":
        return Liveness.PENDING
    return Liveness.UNKNOWN


def create_kube_http_client(
    api_url: str,
    token_file: Path,
    ca_file: Path,
    timeout: float = 10.0,
) -> httpx.AsyncClient:
    """
    Build an httpx client for the in-cluster API server.

    The service account token and CA bundle are used when present, so the
    same code works against a local proxy (kubectl proxy) without them.
    """
    headers = {}
    if token_file.is_file():
        headers["Authorization"] = f"Bearer {token_file.read_text().strip()}"

    verify: ssl.SSLContext | bool = True
    if ca_file.is_file():
        verify = ssl.create_default_context(cafile=str(ca_file))

    return httpx.AsyncClient(
        base_url=api_url,
        headers=headers,
        verify=verify,
        timeout=timeout,
    )
