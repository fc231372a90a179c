from datetime import datetime, timezone
from unittest import mock

import pytest
from kubernetes import client

from k8s_test.app import create_app
from k8s_test.config import Settings
from k8s_test.kube import ClusterClient


def make_pod(image="nginx:1.25", restart_count=3, node="node-1"):
    return client.V1Pod(
        spec=client.V1PodSpec(
            containers=[client.V1Container(name="web", image=image)],
            node_name=node,
        ),
        status=client.V1PodStatus(
            container_statuses=[
                client.V1ContainerStatus(
                    name="web",
                    image=image,
                    image_id=f"docker-pullable://{image}@sha256:abc123",
                    ready=True,
                    restart_count=restart_count,
                )
            ],
            start_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        ),
    )


@pytest.fixture
def podinfo_dir(tmp_path):
    directory = tmp_path / "podinfo"
    directory.mkdir()
    (directory / "name").write_text("web-0")
    (directory / "namespace").write_text("demo")
    (directory / ".hidden").write_text("secret")
    return directory


@pytest.fixture
def settings(podinfo_dir):
    return Settings(
        hostname="web-0",
        namespace="demo",
        podinfo_path=str(podinfo_dir),
        background_color="#000000",
        foreground_color="#00ff00",
    )


@pytest.fixture
def core_v1():
    api = mock.Mock()
    api.read_namespaced_pod.return_value = make_pod()
    api.read_namespaced_config_map.return_value = client.V1ConfigMap(data={"greeting": "hello"})
    return api


@pytest.fixture
def kube(core_v1, settings):
    return ClusterClient(core_v1, namespace=settings.namespace, hostname=settings.hostname)


@pytest.fixture
def environ():
    return {"HOSTNAME": "web-0", "PATH": "/usr/bin", "EQUATION": "a=b=c"}


@pytest.fixture
def app(settings, kube, environ):
    return create_app(settings, kube_client=kube, environ=environ)


@pytest.fixture
def test_client(app):
    return app.test_client()
