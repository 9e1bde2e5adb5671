import logging
from typing import Callable, List

from sidecarinjector.exceptions import NamespaceResolutionError

logger = logging.getLogger("sidecarinjector")


def get_candidate_namespaces(
    namespace: str, common_namespace: Callable[[], str], logger=logger
) -> List[str]:
    """
    It builds the ordered list of namespaces to look up sidecar configmaps in

    :param namespace: the namespace of the pod, always searched first
    :type namespace: str
    :param common_namespace: resolves the shared namespace, raises NamespaceResolutionError if it cannot
    :param logger: a logger object
    :return: The pod namespace, followed by the shared namespace if it could be resolved
    """
    namespaces = [namespace]
    try:
        shared = common_namespace()
    except NamespaceResolutionError as e:
        logger.error(str(e))
        return namespaces
    if shared not in namespaces:
        namespaces.append(shared)
    return namespaces
