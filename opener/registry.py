"""
Opener - Action registry.
Maps command identifiers to command templates:
    <namespace>.openXcode, .openAndroidStudio, .openCurrentWindow, .openNewWindow   (presets)
    <namespace>.custom.<index>                                                     (valid custom actions, in order)
and dispatches an invocation against a folder to the executor.
"""
import json
import os
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

from .executor import Notifier, run_with_notification
from .log_sink import LogSink
from .models import CommandTemplate, ExecuteRequest, ExecuteResult, FolderAction
from .validator import check_custom_action

PRESET_ACTIONS: Dict[str, CommandTemplate] = {
    "openXcode": CommandTemplate(label="🧩 Open in Xcode", command="open", args=["-a", "Xcode", "."]),
    "openAndroidStudio": CommandTemplate(
        label="🤖 Open in Android Studio", command="open", args=["-a", "Android Studio", "."]
    ),
    "openCurrentWindow": CommandTemplate(label="💠 Open here in VSCode", command="code", args=["."]),
    "openNewWindow": CommandTemplate(label="💠 Open in new VSCode window", command="code", args=["-n", "."]),
}


def resolve_folder_path(target: str) -> str:
    """Absolute filesystem path for a plain path or a file:// URI."""
    if target.startswith("file:"):
        parsed = urlparse(target)
        path = url2pathname(parsed.path)
        if parsed.netloc and parsed.netloc != "localhost":
            path = f"//{parsed.netloc}{path}"
        return os.path.abspath(path)
    return os.path.abspath(os.path.expanduser(target))


def _describe(record: Any) -> str:
    try:
        return json.dumps(record, default=repr)
    except (TypeError, ValueError):
        return repr(record)


def load_custom_actions(records: Any, sink: LogSink) -> List[FolderAction]:
    if not isinstance(records, list):
        sink.warn(f"Custom actions must be an array, got {type(records).__name__}; ignoring")
        records = []

    valid: List[FolderAction] = []
    for i, record in enumerate(records):
        outcome = check_custom_action(record)
        if outcome.ok:
            valid.append(outcome.action)
        else:
            sink.warn(f"Invalid custom action at index {i}: {_describe(record)} ({outcome.reason})")

    sink.info(f"Loaded {len(valid)} valid custom action(s) from configuration")
    return valid


class ActionRegistry:
    def __init__(self, sink: LogSink, namespace: str = "opener",
                 presets: Optional[Dict[str, CommandTemplate]] = None):
        self.sink = sink
        self.namespace = namespace
        self._presets = dict(PRESET_ACTIONS if presets is None else presets)
        self._commands: Dict[str, CommandTemplate] = {}

    # ─── Lifecycle ────────────────────────────────────────────────────────────

    def activate(self, records: Any = None) -> None:
        self.sink.info("Opener activating...")
        self._register_presets()
        self.load([] if records is None else records)
        self.sink.info("Opener activated successfully")

    def deactivate(self) -> None:
        self.sink.info("Opener deactivating...")
        self._commands.clear()

    def _register_presets(self) -> None:
        for name, template in self._presets.items():
            self._commands[f"{self.namespace}.{name}"] = template
        self.sink.info(f"Registered {len(self._presets)} preset commands")

    def load(self, records: Any) -> List[str]:
        """Register `<ns>.custom.<i>` for each valid record. Returns the new ids."""
        ids = []
        for i, action in enumerate(load_custom_actions(records, self.sink)):
            command_id = f"{self.namespace}.custom.{i}"
            self._commands[command_id] = action
            ids.append(command_id)
            self.sink.info(f'Registered custom command: {command_id} for folder "{action.folder_name}"')
        self.sink.info(f"Registered {len(ids)} custom command(s)")
        return ids

    def reload(self, records: Any) -> List[str]:
        prefix = f"{self.namespace}.custom."
        for command_id in [c for c in self._commands if c.startswith(prefix)]:
            del self._commands[command_id]
        return self.load(records)

    # ─── Lookup / dispatch ────────────────────────────────────────────────────

    def get(self, command_id: str) -> Optional[CommandTemplate]:
        return self._commands.get(command_id)

    def commands(self) -> Dict[str, CommandTemplate]:
        return dict(self._commands)

    def build_request(self, command_id: str, target: str) -> ExecuteRequest:
        template = self._commands.get(command_id)
        if template is None:
            raise KeyError(command_id)
        return ExecuteRequest(
            command=template.command,
            args=list(template.args),
            cwd=resolve_folder_path(target),
            label=template.label,
        )

    async def dispatch(self, command_id: str, target: str,
                       notify: Optional[Notifier] = None) -> ExecuteResult:
        """Run a registered command in `target`. Unknown ids raise KeyError."""
        request = self.build_request(command_id, target)
        return await run_with_notification(request, self.sink, notify)
