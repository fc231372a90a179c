"""
Status page sections.

Each reader returns a flat str -> str mapping. `assemble` wraps them into
titled sections in display order. Nothing here is cached; every call reads
its source again.
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Mapping, Optional

from k8s_test.config import DEFAULT_PODINFO_PATH
from k8s_test.context import ServiceContext
from k8s_test.timefmt import format_duration, format_rfc3339
from k8s_test.version import get_version_info


@dataclass
class Section:
    title: str
    data: Dict[str, str] = field(default_factory=dict)


def get_basic_info(hostname: str, started_at: datetime, now: Optional[datetime] = None) -> Dict[str, str]:
    now = now or datetime.now().astimezone()
    return {
        "podname": hostname,
        "podtime": format_rfc3339(now),
        "runtime": format_duration(now - started_at),
    }


def get_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Snapshot the whole process environment, unfiltered."""
    return dict(os.environ if environ is None else environ)


def get_pod_info(path: str = "") -> Dict[str, str]:
    """
    Read every non-hidden file of a downward API directory.

    A directory that cannot be listed yields an empty mapping. A file that
    cannot be read is kept, with the error text as its value.
    """
    path = path or DEFAULT_PODINFO_PATH
    try:
        names = sorted(os.listdir(path))
    except OSError:
        return {}

    podinfo = {}
    for name in names:
        if name.startswith("."):
            continue
        try:
            with open(os.path.join(path, name), "r", encoding="utf-8", errors="replace") as f:
                podinfo[name] = f.read()
        except OSError as e:
            podinfo[name] = str(e)
    return podinfo


def assemble(ctx: ServiceContext, environ: Optional[Mapping[str, str]] = None) -> List[Section]:
    settings = ctx.settings
    kube = ctx.kube

    configmaps = {}
    api_info = {}
    if kube is not None:
        if settings.configmaps:
            configmaps = kube.get_config_maps(settings.configmaps)
        api_info = kube.get_self_pod()

    return [
        Section("Basic", get_basic_info(settings.hostname, ctx.started_at)),
        Section("Pod Info", get_pod_info(settings.podinfo_path)),
        Section("ConfigMap Data", configmaps),
        Section("API Info", api_info),
        Section("Binary Version", get_version_info()),
        Section("Environment Variables", get_env(environ)),
    ]
