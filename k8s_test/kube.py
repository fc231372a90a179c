"""
In-cluster Kubernetes API lookups.

Only built when the pod can see the API server through the standard
KUBERNETES_SERVICE_HOST / KUBERNETES_SERVICE_PORT variables. Every call
goes straight to the API server: no caching, no retries.
"""
import logging
from typing import Dict, Iterable, Optional

from kubernetes import client, config

from k8s_test.config import Settings
from k8s_test.timefmt import format_rfc3339

logger = logging.getLogger(__name__)

MISSING_REFERENCE_ERROR = "error: missing namespace or name"


def split_reference(reference: str, default_namespace: str):
    """Split `namespace/name` or bare `name` into (namespace, name)."""
    if "/" in reference:
        namespace, name = reference.split("/", 1)
        return namespace, name
    return default_namespace, reference


class ClusterClient:
    """Reads the pod's own Pod object and ConfigMaps through CoreV1Api."""

    def __init__(self, core_v1, namespace: str = "", hostname: str = ""):
        self.core_v1 = core_v1
        self.namespace = namespace
        self.hostname = hostname

    @classmethod
    def from_env(cls, settings: Settings) -> Optional["ClusterClient"]:
        """Return a client, or None when not running in a cluster or setup fails."""
        if not settings.in_cluster:
            logger.info("Kubernetes service discovery variables not set; API lookups disabled.")
            return None

        try:
            config.load_incluster_config()
            core_v1 = client.CoreV1Api()
        except Exception as e:
            logger.error(f"Could not load in-cluster K8s config: {e}")
            return None

        logger.info("Successfully loaded in-cluster K8s config.")
        return cls(core_v1, namespace=settings.namespace, hostname=settings.hostname)

    def get_self_pod(self) -> Dict[str, str]:
        """Project the fields of this pod's Pod object shown under "API Info"."""
        if not self.namespace:
            return {}

        info = {}
        try:
            pod = self.core_v1.read_namespaced_pod(name=self.hostname, namespace=self.namespace)
        except Exception as e:
            logger.error(f"Error fetching pod {self.namespace}/{self.hostname}: {e}")
            info["error"] = f"pods error: {e}"
            return info

        if pod.spec.containers:
            info["spec.image"] = pod.spec.containers[0].image
        if pod.status.container_statuses:
            status = pod.status.container_statuses[0]
            info["status.image"] = status.image
            info["status.imageID"] = status.image_id
            info["restartCount"] = str(status.restart_count)
            info["startTime"] = format_rfc3339(pod.status.start_time)
        info["node"] = pod.spec.node_name or ""
        return info

    def get_config_map(self, name: str, namespace: Optional[str] = None) -> Dict[str, str]:
        """Fetch one ConfigMap's data. Raises whatever the API client raises."""
        configmap = self.core_v1.read_namespaced_config_map(
            name=name, namespace=namespace or self.namespace
        )
        return dict(configmap.data or {})

    def get_config_maps(self, references: Iterable[str]) -> Dict[str, str]:
        """
        Merge the data of several ConfigMaps into one mapping.

        Errors are recorded per reference, so a failing lookup leaves the
        others intact:
            ":<reference>"  the reference lacks a namespace or a name
            "error:<index>" the lookup of the index-th reference failed
        """
        data = {}
        for i, reference in enumerate(references):
            namespace, name = split_reference(reference, self.namespace)
            if not namespace or not name:
                data[f":{reference}"] = MISSING_REFERENCE_ERROR
                continue
            try:
                data.update(self.get_config_map(name, namespace))
            except Exception as e:
                logger.error(f"Error fetching configmap {namespace}/{name}: {e}")
                data[f"error:{i}"] = str(e)
        return data
