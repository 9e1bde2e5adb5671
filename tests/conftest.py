import logging

import pytest

from sidecarinjector.configuration import OverridePolicy
from sidecarinjector.loader import SidecarTemplateLoader
from sidecarinjector.patcher import SidecarInjectorPatcher

from tests.utils import ANNOTATION, COMMON_NAMESPACE, DATA_KEY


@pytest.fixture
def logger():
    return logging.getLogger("sidecarinjector.test")

@pytest.fixture
def injector_env(monkeypatch, tmp_path):
    namespace_file = tmp_path / "namespace"
    namespace_file.write_text(f"{COMMON_NAMESPACE}\n")
    monkeypatch.setenv("SIDECAR_INJECTOR_NAMESPACE_FILE", str(namespace_file))
    monkeypatch.delenv("CONF_NAMESPACE", raising=False)
    for key in [
        "SIDECAR_INJECTOR_PREFIX",
        "SIDECAR_INJECTOR_NAME",
        "SIDECAR_INJECTOR_DATA_KEY",
        "SIDECAR_INJECTOR_ALLOW_ANNOTATION_OVERRIDES",
        "SIDECAR_INJECTOR_ALLOW_LABEL_OVERRIDES",
        "SIDECAR_INJECTOR_FAIL_CLOSED",
        "SIDECAR_INJECTOR_WEBHOOK_PORT",
        "SIDECAR_INJECTOR_MAX_WORKERS",
    ]:
        monkeypatch.delenv(key, raising=False)
    return namespace_file

@pytest.fixture
def make_patcher():
    def _make(
        read_configmap,
        policy: OverridePolicy = OverridePolicy(),
        common_namespace=lambda: COMMON_NAMESPACE,
        fail_closed: bool = False,
    ) -> SidecarInjectorPatcher:
        return SidecarInjectorPatcher(
            loader=SidecarTemplateLoader(read_configmap, DATA_KEY),
            annotation=ANNOTATION,
            policy=policy,
            common_namespace=common_namespace,
            fail_closed=fail_closed,
        )

    return _make
