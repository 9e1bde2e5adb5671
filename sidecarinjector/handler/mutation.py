from typing import List

import jsonpatch
import kopf

from sidecarinjector.configuration import configuration, InjectorConfiguration
from sidecarinjector.exceptions import InjectionError
from sidecarinjector.loader import SidecarTemplateLoader
from sidecarinjector.patcher import SidecarInjectorPatcher
from sidecarinjector.patches import PatchOperation
from sidecarinjector.resources.configmaps import read_configmap


def create_patcher(config: InjectorConfiguration) -> SidecarInjectorPatcher:
    return SidecarInjectorPatcher(
        loader=SidecarTemplateLoader(read_configmap, config.SIDECAR_DATA_KEY),
        annotation=config.injection_annotation,
        policy=config.override_policy,
        common_namespace=config.common_namespace,
        fail_closed=config.FAIL_CLOSED,
    )


def apply_operations(body, operations: List[PatchOperation], patch) -> None:
    """
    It applies the JSON Patch operations to a copy of body and writes every touched field into the kopf patch

    :param body: The body of the admission request object
    :param operations: The operations created by the patcher
    :param patch: The kopf patch of the admission response
    """
    if not operations:
        return
    mutated = jsonpatch.apply_patch(
        dict(body), [operation.to_dict() for operation in operations]
    )
    touched = []
    for operation in operations:
        section, key = operation.path.split("/")[1:3]
        if (section, key) not in touched:
            touched.append((section, key))
    for section, key in touched:
        patch.setdefault(section, {})[key] = mutated[section][key]


@kopf.on.mutate("pods", id="inject-sidecars")  # type: ignore
def inject_sidecars(body, patch, logger, operation, namespace=None, old=None, **_):
    """
    Inject the sidecars requested by the pod's injection annotation. Only pod creation is mutated.

    :param body: The body of the request
    :param patch: The patch of the admission response
    :param logger: A logger object that can be used to log messages
    :param operation: The operation that is being performed on the resource
    :param namespace: The namespace of the pod
    """
    patcher = create_patcher(configuration)
    namespace = (body.get("metadata") or {}).get("namespace") or namespace
    if not namespace:
        logger.warning("Skipping mutation, the namespace of the pod is unknown")
        return

    if operation == "CREATE":
        try:
            operations = patcher.patch_pod_create(namespace, body, logger=logger)
        except InjectionError as e:
            logger.error(f"Sidecar injection failed: {e}")
            raise kopf.AdmissionError(f"Sidecar injection failed: {e}")
    elif operation == "UPDATE":
        operations = patcher.patch_pod_update(namespace, old or body, body, logger=logger)
    elif operation == "DELETE":
        operations = patcher.patch_pod_delete(namespace, body, logger=logger)
    else:
        return
    apply_operations(body, operations, patch)
