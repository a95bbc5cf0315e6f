from .copywriter import CopywriterAgent
from .errors import AgentEmptyResult, AgentError, AgentRequestFailed, UnexpectedFailure, UnsupportedInput
from .image_loader import UploadedImage, load_image
from .studio import StudioAgent
from .workflow import LogEntry, WorkflowOrchestrator, WorkflowState, WorkflowStatus

__all__ = [
    "AgentEmptyResult",
    "AgentError",
    "AgentRequestFailed",
    "CopywriterAgent",
    "LogEntry",
    "StudioAgent",
    "UnexpectedFailure",
    "UnsupportedInput",
    "UploadedImage",
    "WorkflowOrchestrator",
    "WorkflowState",
    "WorkflowStatus",
    "load_image",
]
