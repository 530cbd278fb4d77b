"""
Opener - FastAPI router.
Mount with:
    from opener.router import mount_opener
    mount_opener(app, registry)

Endpoints:
    GET  /opener/health
    GET  /opener/commands
    POST /opener/reload
    POST /opener/commands/{command_id}
"""
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Header, HTTPException

from .config import load_custom_folders
from .models import FolderAction, RunCommandBody, RunCommandResponse
from .registry import ActionRegistry


def build_router(registry: ActionRegistry, settings_path: Path, api_token: str) -> APIRouter:
    router = APIRouter(prefix="/opener", tags=["opener"])

    def _auth(authorization: Optional[str]):
        if authorization != f"Bearer {api_token}":
            raise HTTPException(status_code=401, detail="Unauthorized")

    @router.get("/health")
    def health():
        return {
            "status": "ready",
            "namespace": registry.namespace,
            "commands": len(registry.commands()),
        }

    @router.get("/commands")
    def list_commands(authorization: Optional[str] = Header(None)):
        _auth(authorization)
        items = []
        for command_id, template in registry.commands().items():
            entry = {
                "id": command_id,
                "label": template.label,
                "command": template.command,
                "args": template.args,
            }
            if isinstance(template, FolderAction):
                entry["folderName"] = template.folder_name
            items.append(entry)
        return {"count": len(items), "commands": items}

    @router.post("/reload")
    def reload_commands(authorization: Optional[str] = Header(None)):
        """Re-read the settings file and rebuild the custom commands."""
        _auth(authorization)
        ids = registry.reload(load_custom_folders(settings_path, registry.sink, registry.namespace))
        return {"reloaded": True, "custom_commands": ids}

    @router.post("/commands/{command_id}", response_model=RunCommandResponse)
    async def run_command(command_id: str, body: RunCommandBody,
                          authorization: Optional[str] = Header(None)):
        """
        Run a registered command with the given folder as working directory.
        A failed run is still a 200: the failure is in `ok`, `error` and `notification`.
        """
        _auth(authorization)
        if registry.get(command_id) is None:
            raise HTTPException(status_code=404, detail=f"Unknown command: {command_id}")
        notifications: List[str] = []
        result = await registry.dispatch(command_id, body.folder, notify=notifications.append)
        return RunCommandResponse(
            **result.model_dump(),
            notification=notifications[0] if notifications else None,
        )

    return router


def mount_opener(app: FastAPI, registry: ActionRegistry, settings_path: Path, api_token: str):
    """Mount the Opener routes onto an existing FastAPI app."""
    app.include_router(build_router(registry, settings_path, api_token))
    registry.sink.info("Opener mounted at /opener/*")
