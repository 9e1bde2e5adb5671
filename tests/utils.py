from typing import Optional
from unittest.mock import Mock

import kubernetes as k8s

ANNOTATION = "sidecar-injector.io/inject"
DATA_KEY = "sidecars.yaml"
COMMON_NAMESPACE = "sidecar-injector"


SIDECARS_YAML = """
- name: logger
  initContainers:
    - name: init-logger
      image: busybox:1.36
      command: ["sh", "-c", "mkdir -p /var/log/app"]
  containers:
    - name: logger
      image: fluent/fluent-bit:2.1
    - name: exporter
      image: prom/statsd-exporter:v0.24.0
  volumes:
    - name: logs
      emptyDir: {}
  imagePullSecrets:
    - name: registry-credentials
  annotations:
    sidecar-injector.io/status: injected
  labels:
    logging: enabled
"""


def demo_pod(
    name: str = "web",
    annotations: Optional[dict] = None,
    labels: Optional[dict] = None,
    containers: Optional[list] = None,
    volumes: Optional[list] = None,
) -> dict:
    metadata = {"name": name, "namespace": "default"}
    if annotations is not None:
        metadata["annotations"] = annotations
    if labels is not None:
        metadata["labels"] = labels
    spec = {
        "containers": containers
        if containers is not None
        else [{"name": "nginx", "image": "registry.k8s.io/nginx-slim:0.8"}]
    }
    if volumes is not None:
        spec["volumes"] = volumes
    return {"apiVersion": "v1", "kind": "Pod", "metadata": metadata, "spec": spec}


def demo_configmap(name: str, namespace: str, data: Optional[dict]) -> k8s.client.V1ConfigMap:
    return k8s.client.V1ConfigMap(
        api_version="v1",
        kind="ConfigMap",
        data=data,
        metadata=k8s.client.V1ObjectMeta(name=name, namespace=namespace),
    )


def configmap_store(configmaps: dict) -> Mock:
    """
    A read_configmap stand-in serving configmaps keyed by (namespace, name), 404 for everything else
    """

    def read_configmap(namespace: str, name: str) -> k8s.client.V1ConfigMap:
        try:
            return configmaps[(namespace, name)]
        except KeyError:
            raise k8s.client.exceptions.ApiException(status=404, reason="Not Found")

    return Mock(side_effect=read_configmap)
