import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from sidecarinjector.exceptions import InjectionError
from sidecarinjector.configuration import OverridePolicy
from sidecarinjector.loader import SidecarTemplateLoader
from sidecarinjector.namespaces import get_candidate_namespaces
from sidecarinjector.patches import (
    PatchOperation,
    create_array_patches,
    create_object_patches,
)
from sidecarinjector.sidecar import ARRAY_FIELDS, Sidecar

logger = logging.getLogger("sidecarinjector")


def get_pod_name(pod: dict) -> str:
    metadata = pod.get("metadata") or {}
    return metadata.get("name") or metadata.get("generateName") or ""


def get_sidecar_names(annotations: Optional[dict], annotation: str) -> List[str]:
    """
    It returns the trimmed, non-empty sidecar names listed in the injection annotation

    :param annotations: the annotations of the pod
    :type annotations: Optional[dict]
    :param annotation: the key of the injection annotation
    :type annotation: str
    :return: The requested sidecar names in order, duplicates included
    """
    value = (annotations or {}).get(annotation)
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class PodFields:
    """
    The fields of the pod that the injection depends on, advanced after each sidecar
    """

    namespace: str
    name: str
    annotations: Optional[dict]
    labels: Optional[dict]
    array_counts: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_pod(cls, namespace: str, pod: dict) -> "PodFields":
        metadata = pod.get("metadata") or {}
        spec = pod.get("spec") or {}
        annotations = metadata.get("annotations")
        labels = metadata.get("labels")
        return cls(
            namespace=namespace,
            name=get_pod_name(pod),
            annotations=dict(annotations) if annotations is not None else None,
            labels=dict(labels) if labels is not None else None,
            array_counts={
                _field: len(spec.get(_field) or []) for _field in ARRAY_FIELDS
            },
        )

    def apply(self, sidecar: Sidecar, policy: OverridePolicy) -> None:
        for _field in ARRAY_FIELDS:
            self.array_counts[_field] += len(getattr(sidecar, _field))
        self.annotations = self._merged(
            self.annotations, sidecar.annotations, policy.annotations
        )
        self.labels = self._merged(self.labels, sidecar.labels, policy.labels)

    @staticmethod
    def _merged(existing: Optional[dict], new: dict, override: bool) -> Optional[dict]:
        if not new:
            return existing
        if existing is None:
            return dict(new)
        merged = dict(existing)
        for key, value in new.items():
            if key not in merged or override:
                merged[key] = value
        return merged


def create_sidecar_patches(
    sidecar: Sidecar, pod_fields: PodFields, policy: OverridePolicy
) -> List[PatchOperation]:
    """
    It creates the patch operations injecting one sidecar into the pod described by pod_fields

    :param sidecar: the sidecar template to inject
    :type sidecar: Sidecar
    :param pod_fields: the current state of the pod fields
    :type pod_fields: PodFields
    :param policy: whether existing annotations and labels may be replaced
    :type policy: OverridePolicy
    :return: The patch operations for this sidecar
    """
    patches = []
    for _field in ARRAY_FIELDS:
        patches.extend(
            create_array_patches(
                getattr(sidecar, _field),
                pod_fields.array_counts[_field],
                f"/spec/{_field}",
            )
        )
    patches.extend(
        create_object_patches(
            sidecar.annotations,
            pod_fields.annotations,
            "/metadata/annotations",
            policy.annotations,
        )
    )
    patches.extend(
        create_object_patches(
            sidecar.labels, pod_fields.labels, "/metadata/labels", policy.labels
        )
    )
    return patches


class SidecarInjectorPatcher:
    def __init__(
        self,
        loader: SidecarTemplateLoader,
        annotation: str,
        policy: OverridePolicy,
        common_namespace: Callable[[], str],
        fail_closed: bool = False,
    ):
        self.loader = loader
        self.annotation = annotation
        self.policy = policy
        self.common_namespace = common_namespace
        self.fail_closed = fail_closed

    def sidecar_names(self, namespace: str, pod: dict, logger=logger) -> List[str]:
        metadata = pod.get("metadata") or {}
        names = get_sidecar_names(metadata.get("annotations"), self.annotation)
        if names:
            logger.info(
                f"sidecar injection for {namespace}/{get_pod_name(pod)}: sidecars: {', '.join(names)}"
            )
        else:
            logger.info(f"Skipping mutation for [{get_pod_name(pod)}]. No action required")
        return names

    def patch_pod_create(
        self, namespace: str, pod: dict, logger=logger
    ) -> List[PatchOperation]:
        """
        It creates the JSON Patch operations injecting every sidecar requested by the pod

        Sidecars that cannot be found, fetched or decoded are skipped. If fail_closed is set, these errors are
        raised as InjectionError once all requested sidecars have been processed.

        :param namespace: the namespace of the admission request
        :type namespace: str
        :param pod: the pod as it is about to be created
        :type pod: dict
        :param logger: a logger object
        :return: The ordered list of patch operations, possibly empty
        """
        patches = []
        names = self.sidecar_names(namespace, pod, logger=logger)
        if not names:
            return patches

        pod_fields = PodFields.from_pod(namespace, pod)
        namespaces = get_candidate_namespaces(
            namespace, self.common_namespace, logger=logger
        )
        errors = []
        for name in names:
            lookup = self.loader.lookup(name, namespaces, logger=logger)
            if lookup.error:
                errors.append(lookup.error)
            for sidecar in lookup.sidecars:
                patches.extend(create_sidecar_patches(sidecar, pod_fields, self.policy))
                pod_fields.apply(sidecar, self.policy)
        logger.debug(
            f"sidecar patches being applied for {namespace}/{pod_fields.name}: "
            f"patches: {[patch.to_dict() for patch in patches]}"
        )
        if errors and self.fail_closed:
            raise InjectionError(errors)
        return patches

    def patch_pod_update(
        self, namespace: str, old_pod: dict, new_pod: dict, logger=logger
    ) -> List[PatchOperation]:
        # only pod creation is supported
        return []

    def patch_pod_delete(
        self, namespace: str, pod: dict, logger=logger
    ) -> List[PatchOperation]:
        # only pod creation is supported
        return []
