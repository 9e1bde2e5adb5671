import logging

from sidecarinjector.exceptions import NamespaceResolutionError
from sidecarinjector.namespaces import get_candidate_namespaces


def test_candidate_namespaces():
    assert get_candidate_namespaces("default", lambda: "sidecar-injector") == [
        "default",
        "sidecar-injector",
    ]


def test_candidate_namespaces_same_namespace():
    assert get_candidate_namespaces("sidecar-injector", lambda: "sidecar-injector") == [
        "sidecar-injector"
    ]


def test_candidate_namespaces_unresolvable(caplog):
    def unresolvable():
        raise NamespaceResolutionError("could not determine configmap namespace")

    with caplog.at_level(logging.ERROR, logger="sidecarinjector"):
        namespaces = get_candidate_namespaces("default", unresolvable)
    assert namespaces == ["default"]
    assert "could not determine configmap namespace" in caplog.text
