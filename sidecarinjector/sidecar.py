import logging
from dataclasses import dataclass, field, fields
from typing import List

import yaml

from sidecarinjector.exceptions import SidecarDecodeError

logger = logging.getLogger("sidecarinjector")

ARRAY_FIELDS = ["initContainers", "containers", "volumes", "imagePullSecrets"]
MAP_FIELDS = ["annotations", "labels"]


@dataclass
class Sidecar:
    name: str = field(default_factory=lambda: "")
    initContainers: list = field(default_factory=list)
    containers: list = field(default_factory=list)
    volumes: list = field(default_factory=list)
    imagePullSecrets: list = field(default_factory=list)
    annotations: dict = field(default_factory=dict)
    labels: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict, logger=logger) -> "Sidecar":
        _s = cls()
        field_names = [_field.name for _field in fields(_s)]
        for k, v in data.items():
            if k not in field_names:
                logger.warning(f"The sidecar key '{k}' is unknown.")
                continue
            if v is None:
                continue
            if k in ARRAY_FIELDS:
                if type(v) is not list:
                    raise SidecarDecodeError(f"'{k}' of sidecar must be a list")
                for item in v:
                    if type(item) is not dict:
                        raise SidecarDecodeError(
                            f"every entry of '{k}' of sidecar must be a mapping, got {item!r}"
                        )
            if k in MAP_FIELDS:
                if type(v) is not dict:
                    raise SidecarDecodeError(f"'{k}' of sidecar must be a mapping")
                for key, value in v.items():
                    if type(key) is not str or type(value) is not str:
                        raise SidecarDecodeError(
                            f"'{k}' of sidecar must map strings to strings, got {key!r}: {value!r}"
                        )
            if k == "name":
                v = str(v)
            setattr(_s, k, v)
        return _s


def decode_sidecars(raw: str, logger=logger) -> List[Sidecar]:
    """
    It deserializes a YAML (or JSON) list of sidecar templates

    :param raw: the serialized list of sidecars as stored in the configmap
    :type raw: str
    :param logger: a logger object
    :return: The list of sidecars in the order they are declared
    """
    try:
        documents = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise SidecarDecodeError(f"sidecars are not valid YAML: {e}") from e
    if documents is None:
        return []
    if type(documents) is not list:
        raise SidecarDecodeError("sidecars must be a list")
    sidecars = []
    for document in documents:
        if type(document) is not dict:
            raise SidecarDecodeError("every sidecar must be a mapping")
        sidecars.append(Sidecar.from_dict(document, logger=logger))
    return sidecars
