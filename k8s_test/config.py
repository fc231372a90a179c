"""Settings read from the process environment at startup."""
import os
import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

DEFAULT_PORT = 8080
DEFAULT_PODINFO_PATH = "/etc/podinfo"
DEFAULT_TITLE = "k8s-test"

TRUE_VALUES = ("1", "true", "yes")


def parse_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in TRUE_VALUES


def parse_list(value: Optional[str]) -> List[str]:
    """Split a comma and/or whitespace separated list, dropping empty items."""
    return [item for item in re.split(r"[,\s]+", value or "") if item]


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    background_color: str = ""
    foreground_color: str = ""
    hostname: str = ""
    namespace: str = ""
    podinfo_path: str = DEFAULT_PODINFO_PATH
    configmaps: List[str] = field(default_factory=list)
    kubernetes_service_host: str = ""
    kubernetes_service_port: str = ""
    title: str = DEFAULT_TITLE
    log_level: str = "INFO"
    request_logging: bool = False

    @property
    def in_cluster(self) -> bool:
        """True when both in-cluster service discovery variables are set."""
        return bool(self.kubernetes_service_host and self.kubernetes_service_port)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        CONFIGMAPS holds `namespace/name` or bare `name` references. The
        single-object CONFIGMAP_NAME (with optional CONFIGMAP_NAMESPACE) is
        appended to that list as one more reference.

        Raises ValueError when PORT is not an integer.
        """
        env = os.environ if environ is None else environ

        port = env.get("PORT") or str(DEFAULT_PORT)
        try:
            port_number = int(port)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port!r}") from None

        configmaps = parse_list(env.get("CONFIGMAPS"))
        single_name = env.get("CONFIGMAP_NAME", "").strip()
        if single_name:
            single_namespace = env.get("CONFIGMAP_NAMESPACE", "").strip()
            if single_namespace:
                configmaps.append(f"{single_namespace}/{single_name}")
            else:
                configmaps.append(single_name)

        return cls(
            port=port_number,
            background_color=env.get("BACKGROUND_COLOR", ""),
            foreground_color=env.get("FOREGROUND_COLOR", ""),
            hostname=env.get("HOSTNAME", ""),
            namespace=env.get("METADATA_NAMESPACE", ""),
            podinfo_path=env.get("PODINFO_PATH") or DEFAULT_PODINFO_PATH,
            configmaps=configmaps,
            kubernetes_service_host=env.get("KUBERNETES_SERVICE_HOST", ""),
            kubernetes_service_port=env.get("KUBERNETES_SERVICE_PORT", ""),
            title=env.get("PAGE_TITLE") or DEFAULT_TITLE,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            request_logging=parse_bool(env.get("REQUEST_LOGGING")),
        )
