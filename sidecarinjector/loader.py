import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import kubernetes as k8s

from sidecarinjector.exceptions import SidecarDecodeError
from sidecarinjector.sidecar import Sidecar, decode_sidecars

logger = logging.getLogger("sidecarinjector")


@dataclass
class SidecarLookup:
    name: str
    namespace: Optional[str] = None
    sidecars: List[Sidecar] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.namespace is not None


class SidecarTemplateLoader:
    def __init__(
        self,
        read_configmap: Callable[[str, str], k8s.client.V1ConfigMap],
        data_key: str,
    ):
        self.read_configmap = read_configmap
        self.data_key = data_key

    def lookup(self, name: str, namespaces: List[str], logger=logger) -> SidecarLookup:
        """
        It searches the namespaces in order for the configmap called name, the first match wins

        A configmap that does not exist, or that lacks the data key, moves the search on to the next namespace. Any
        other error while fetching stops the search for this name.

        :param name: the name of the requested sidecar configmap
        :type name: str
        :param namespaces: the candidate namespaces, in order
        :type namespaces: List[str]
        :param logger: a logger object
        :return: A SidecarLookup holding the decoded sidecars of the first match
        """
        for namespace in namespaces:
            try:
                configmap = self.read_configmap(namespace, name)
            except k8s.client.exceptions.ApiException as e:
                if e.status == 404:
                    logger.warning(f"sidecar configmap {namespace}/{name} was not found")
                    continue
                logger.error(
                    f"error fetching sidecar configmap {namespace}/{name} - {e.reason}"
                )
                return SidecarLookup(
                    name=name,
                    error=f"error fetching sidecar configmap {namespace}/{name}: {e.reason}",
                )
            except Exception as e:  # noqa
                logger.error(f"error fetching sidecar configmap {namespace}/{name} - {e}")
                return SidecarLookup(
                    name=name,
                    error=f"error fetching sidecar configmap {namespace}/{name}: {e}",
                )

            data = configmap.data or {}
            if self.data_key not in data:
                logger.warning(
                    f"sidecar configmap {namespace}/{name} has no key '{self.data_key}'"
                )
                continue
            try:
                sidecars = decode_sidecars(data[self.data_key], logger=logger)
            except SidecarDecodeError as e:
                logger.error(
                    f"error unmarshalling {self.data_key} from configmap {namespace}/{name}: {e}"
                )
                return SidecarLookup(
                    name=name,
                    namespace=namespace,
                    error=f"error unmarshalling {self.data_key} from configmap {namespace}/{name}: {e}",
                )
            return SidecarLookup(name=name, namespace=namespace, sidecars=sidecars)
        return SidecarLookup(name=name)
