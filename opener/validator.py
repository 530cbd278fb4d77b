"""
Opener - Custom action validator.
Checks untrusted records from the `opener.customFolders` setting.
No coercion and no repair: a record is either a complete FolderAction or rejected.
"""
from collections.abc import Mapping
from typing import Any

from .models import FolderAction, Validation

REQUIRED_STRINGS = ("folderName", "label", "command")


def check_custom_action(candidate: Any) -> Validation:
    if not isinstance(candidate, Mapping):
        return Validation(reason=f"expected an object, got {type(candidate).__name__}")

    for key in REQUIRED_STRINGS:
        value = candidate.get(key)
        if not isinstance(value, str):
            return Validation(reason=f"'{key}' must be a string")
        if not value.strip():
            return Validation(reason=f"'{key}' must not be empty")

    args = candidate.get("args")
    if not isinstance(args, (list, tuple)):
        return Validation(reason="'args' must be an array")
    for i, arg in enumerate(args):
        if not isinstance(arg, str):
            return Validation(reason=f"'args[{i}]' must be a string")

    return Validation(action=FolderAction(
        folderName=candidate["folderName"],
        label=candidate["label"],
        command=candidate["command"],
        args=list(args),
    ))


def validate_custom_action(candidate: Any) -> bool:
    return check_custom_action(candidate).ok
