from dataclasses import dataclass, field
from typing import Any, List, Optional

ADD = "add"
REPLACE = "replace"


@dataclass
class PatchOperation:
    op: str
    path: str
    value: Any = field(default=None)

    def to_dict(self) -> dict:
        return {"op": self.op, "path": self.path, "value": self.value}


def escape_pointer_token(token: str) -> str:
    # RFC 6901: '~' has to be escaped before '/'
    return token.replace("~", "~0").replace("/", "~1")


def create_array_patches(
    new_collection: list, existing_count: int, path: str
) -> List[PatchOperation]:
    """
    It creates one add operation per new array element

    If the field has no entries yet, the first element establishes the array with a one-element list, all other
    elements are appended with '<path>/-'.

    :param new_collection: the elements to add
    :type new_collection: list
    :param existing_count: the number of elements already in the target array
    :type existing_count: int
    :param path: the JSON pointer of the target array
    :type path: str
    :return: A list of add operations
    """
    patches = []
    for index, item in enumerate(new_collection):
        if index == 0 and existing_count == 0:
            patches.append(PatchOperation(op=ADD, path=path, value=[item]))
        else:
            patches.append(PatchOperation(op=ADD, path=f"{path}/-", value=item))
    return patches


def create_object_patches(
    new_map: dict, existing_map: Optional[dict], path: str, override: bool
) -> List[PatchOperation]:
    """
    It creates the operations merging new_map into the map at path

    :param new_map: the keys and values to merge
    :type new_map: dict
    :param existing_map: the map currently at path, None if there is none
    :type existing_map: Optional[dict]
    :param path: the JSON pointer of the target map
    :type path: str
    :param override: whether keys that already exist may be replaced
    :type override: bool
    :return: A list of add and replace operations
    """
    if not new_map:
        return []
    if existing_map is None:
        return [PatchOperation(op=ADD, path=path, value=dict(new_map))]
    patches = []
    for key, value in new_map.items():
        key_path = f"{path}/{escape_pointer_token(key)}"
        if key not in existing_map:
            patches.append(PatchOperation(op=ADD, path=key_path, value=value))
        elif override:
            patches.append(PatchOperation(op=REPLACE, path=key_path, value=value))
    return patches
