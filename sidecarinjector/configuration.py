import logging
from dataclasses import dataclass
from typing import Optional

from decouple import config

from sidecarinjector.exceptions import NamespaceResolutionError

logger = logging.getLogger("sidecarinjector")

SERVICEACCOUNT_NAMESPACE_FILE = "/var/run/secrets/kubernetes.io/serviceaccount/namespace"


@dataclass(frozen=True)
class OverridePolicy:
    annotations: bool = False
    labels: bool = False


def resolve_common_namespace(
    override: Optional[str], file_contents: Optional[str]
) -> str:
    """
    It maps the configured override and the contents of the namespace file to the shared namespace

    :param override: the explicit namespace override, takes precedence if not empty
    :type override: Optional[str]
    :param file_contents: the raw contents of the namespace file, None if it could not be read
    :type file_contents: Optional[str]
    :return: The shared namespace holding the sidecar configmaps
    """
    if override and override.strip():
        return override.strip()
    if file_contents is None:
        raise NamespaceResolutionError(
            "failure while looking up configmap namespace: namespace file is not readable"
        )
    namespace = file_contents.strip()
    if not namespace:
        raise NamespaceResolutionError(
            "could not determine configmap namespace. Set CONF_NAMESPACE"
        )
    return namespace


def read_namespace_file(path: str) -> Optional[str]:
    try:
        with open(path) as f:
            return f.read()
    except OSError as e:
        logger.debug(f"Cannot read namespace file {path}: {e}")
        return None


class InjectorConfiguration:
    def __init__(self):
        self.INJECT_PREFIX = config("SIDECAR_INJECTOR_PREFIX", default="sidecar-injector.io")
        self.INJECT_NAME = config("SIDECAR_INJECTOR_NAME", default="inject")
        self.SIDECAR_DATA_KEY = config(
            "SIDECAR_INJECTOR_DATA_KEY", default="sidecars.yaml"
        )
        self.ALLOW_ANNOTATION_OVERRIDES = config(
            "SIDECAR_INJECTOR_ALLOW_ANNOTATION_OVERRIDES", default=False, cast=bool
        )
        self.ALLOW_LABEL_OVERRIDES = config(
            "SIDECAR_INJECTOR_ALLOW_LABEL_OVERRIDES", default=False, cast=bool
        )
        self.FAIL_CLOSED = config("SIDECAR_INJECTOR_FAIL_CLOSED", default=False, cast=bool)
        self.NAMESPACE_FILE = config(
            "SIDECAR_INJECTOR_NAMESPACE_FILE", default=SERVICEACCOUNT_NAMESPACE_FILE
        )

        #
        # admission webhook server
        #
        self.WEBHOOK_PORT = config("SIDECAR_INJECTOR_WEBHOOK_PORT", default=9443, cast=int)
        self.WEBHOOK_HOST = config(
            "SIDECAR_INJECTOR_WEBHOOK_HOST", default="sidecar-injector.sidecar-injector.svc"
        )
        self.WEBHOOK_CERTFILE = config(
            "SIDECAR_INJECTOR_WEBHOOK_CERTFILE", default="/certs/tls.crt"
        )
        self.WEBHOOK_PKEYFILE = config(
            "SIDECAR_INJECTOR_WEBHOOK_PKEYFILE", default="/certs/tls.key"
        )
        self.MAX_WORKERS = config("SIDECAR_INJECTOR_MAX_WORKERS", default=10, cast=int)

    @property
    def injection_annotation(self) -> str:
        return f"{self.INJECT_PREFIX}/{self.INJECT_NAME}"

    @property
    def override_policy(self) -> OverridePolicy:
        return OverridePolicy(
            annotations=self.ALLOW_ANNOTATION_OVERRIDES,
            labels=self.ALLOW_LABEL_OVERRIDES,
        )

    def common_namespace(self) -> str:
        # CONF_NAMESPACE is read on every call; it may change between requests
        return resolve_common_namespace(
            config("CONF_NAMESPACE", default=""),
            read_namespace_file(self.NAMESPACE_FILE),
        )

    def to_dict(self):
        return {k: v for k, v in self.__dict__.items() if k.isupper()}

    def __str__(self):
        return str(self.to_dict())


configuration = InjectorConfiguration()
