"""
Opener - Pydantic models.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class CommandTemplate(BaseModel):
    label: str
    command: str
    args: List[str] = []


class FolderAction(CommandTemplate):
    """A custom action from the `opener.customFolders` setting."""
    model_config = ConfigDict(populate_by_name=True)

    folder_name: str = Field(alias="folderName")


class ExecuteRequest(BaseModel):
    command: str
    args: List[str] = []
    cwd: str
    label: str


class ExecuteResult(BaseModel):
    ok: bool
    label: str
    command_line: str
    cwd: str
    error: Optional[str] = None
    returncode: Optional[int] = None


class Validation(BaseModel):
    """Outcome of checking one untrusted configuration record."""
    action: Optional[FolderAction] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.action is not None


class RunCommandBody(BaseModel):
    folder: str


class RunCommandResponse(ExecuteResult):
    notification: Optional[str] = None
