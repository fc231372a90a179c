"""Build metadata stamped into the package when the image is built."""
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Dict

DIST_NAME = "k8s-test"

# Rewritten by the image build, e.g.
#   sed -i "s/^REVISION = .*/REVISION = \"$(git rev-parse HEAD)\"/" k8s_test/version.py
REVISION = "unknown"
LAST_COMMIT = "0001-01-01T00:00:00Z"


def get_version() -> str:
    try:
        return package_version(DIST_NAME)
    except PackageNotFoundError:
        return "(devel)"


def get_version_info() -> Dict[str, str]:
    return {
        "version": get_version(),
        "last-commit": LAST_COMMIT,
        "revision": REVISION,
    }
