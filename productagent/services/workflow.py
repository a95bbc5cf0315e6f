"""
Workflow orchestrator

Runs the copywriter and studio agents one after the other on the same
uploaded image and keeps the status/log state the UI renders.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Awaitable, Dict, List, Optional

from productagent.config import settings
from productagent.services.copywriter import CopywriterAgent
from productagent.services.errors import AgentError, UnexpectedFailure
from productagent.services.studio import StudioAgent
from productagent.utils.logging_config import log_error_with_context
from productagent.utils.validators import detect_encoded_image_mime_type

logger = logging.getLogger(__name__)


class WorkflowStatus(str, Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass
class LogEntry:
    timestamp: datetime
    message: str

    def to_dict(self) -> Dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "time": self.timestamp.strftime("%H:%M:%S"),
            "message": self.message
        }


@dataclass
class ErrorState:
    message: str


@dataclass
class WorkflowState:
    """Everything the presentation layer shows about the current run"""

    status: WorkflowStatus = WorkflowStatus.IDLE
    logs: List[LogEntry] = field(default_factory=list)
    error: Optional[ErrorState] = None
    title: Optional[str] = None
    image: Optional[str] = None  # base64, no data URL prefix
    image_mime_type: str = "image/jpeg"
    busy: bool = False
    generation: int = 0

    @property
    def image_data_url(self) -> Optional[str]:
        if not self.image:
            return None
        return f"data:{self.image_mime_type};base64,{self.image}"

    def to_dict(self) -> Dict:
        return {
            "status": self.status.value,
            "busy": self.busy,
            "generation": self.generation,
            "logs": [entry.to_dict() for entry in self.logs],
            "error": self.error.message if self.error else None,
            "title": self.title,
            "image": self.image_data_url
        }


class WorkflowOrchestrator:
    """Drives the two-stage agent sequence for one user session"""

    def __init__(
        self,
        copywriter: Optional[CopywriterAgent] = None,
        studio: Optional[StudioAgent] = None
    ):
        self.copywriter = copywriter or CopywriterAgent()
        self.studio = studio or StudioAgent()
        self.state = WorkflowState(image_mime_type=settings.DEFAULT_MIME_TYPE)

    @property
    def is_busy(self) -> bool:
        return self.state.busy

    def add_log(self, message: str):
        self.state.logs.append(LogEntry(timestamp=datetime.now(), message=message))
        logger.info(f"Run {self.state.generation} | {message}")

    def _clear(self):
        self.state.logs = []
        self.state.error = None
        self.state.title = None
        self.state.image = None
        self.state.image_mime_type = settings.DEFAULT_MIME_TYPE

    def reset(self):
        """
        Start a new, independent workflow instance (new image selected).

        Any run still in flight belongs to an older generation and its
        results will be dropped when they arrive.
        """
        self.state.generation += 1
        self.state.status = WorkflowStatus.IDLE
        self.state.busy = False
        self._clear()
        logger.info(f"Workflow reset, generation {self.state.generation}")

    def _is_current(self, generation: int) -> bool:
        return self.state.generation == generation

    async def _call_agent(self, agent_name: str, call: Awaitable):
        try:
            return await call
        except AgentError:
            raise
        except Exception as e:
            raise UnexpectedFailure(agent_name, e) from e

    async def run(self, encoded_image: Optional[str], mime_type: str = "image/jpeg") -> Optional[WorkflowState]:
        """
        Run copywriter then studio on the same encoded image.

        Args:
            encoded_image: Base64 of the uploaded photo
            mime_type: Media type of the uploaded photo

        Returns:
            Final state, or None when nothing ran (no image, already busy,
            or the run was superseded by a reset)
        """
        if not encoded_image:
            return None
        if self.state.busy:
            logger.warning("Run requested while another run is in progress, ignoring")
            return None

        self.state.generation += 1
        generation = self.state.generation
        self.state.status = WorkflowStatus.PROCESSING
        self.state.busy = True
        self._clear()
        self.add_log("Initializing AI Agents...")

        stage = self.copywriter.name
        try:
            # Agent 1: copywriter
            self.add_log("Agent 1 (Copywriter): Analyzing visual features...")
            title = await self._call_agent(stage, self.copywriter.generate_title(encoded_image, mime_type))
            if not self._is_current(generation):
                logger.info(f"Run {generation} superseded, dropping copywriter result")
                return None

            self.state.title = title
            self.add_log(f"Agent 1: Title generated successfully: {title}")

            # Agent 2: studio, on the original upload
            stage = self.studio.name
            self.add_log("Agent 2 (Studio): Setting up lighting and composition...")
            image = await self._call_agent(stage, self.studio.render(encoded_image, mime_type))
            if not self._is_current(generation):
                logger.info(f"Run {generation} superseded, dropping studio result")
                return None

            self.state.image = image
            self.state.image_mime_type = detect_encoded_image_mime_type(image) or settings.DEFAULT_MIME_TYPE
            self.add_log("Agent 2: Rendering complete.")
            self.state.status = WorkflowStatus.COMPLETE
            return self.state

        except AgentError as e:
            if not self._is_current(generation):
                logger.info(f"Run {generation} superseded, dropping {stage} error: {e}")
                return None

            log_error_with_context(logger, e, f"{stage} stage failed", generation)
            self.state.title = None
            self.state.image = None
            self.state.error = ErrorState(message=str(e))
            self.state.status = WorkflowStatus.ERROR
            self.add_log(f"Error: {e}")
            return self.state

        finally:
            if self._is_current(generation):
                self.state.busy = False
