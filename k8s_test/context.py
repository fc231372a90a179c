"""Process-wide state shared read-only by every request."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from jinja2 import Template

from k8s_test.config import Settings
from k8s_test.kube import ClusterClient


@dataclass(frozen=True)
class ServiceContext:
    settings: Settings
    started_at: datetime
    kube: Optional[ClusterClient] = None
    templates: Dict[str, Template] = field(default_factory=dict)
