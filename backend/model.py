# backend/model.py
import html
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GenerationStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    WAITING = "waiting"
    READY = "ready"
    FAILED = "failed"


BUSY_STATUSES = (GenerationStatus.SUBMITTING, GenerationStatus.WAITING)

IDLE_MESSAGE = "Describe what you want to create"
SUBMITTING_MESSAGE = "Generating image..."
DONE_MESSAGE = "Done"


class GenerationState(BaseModel):
    """
    Snapshot of one generation attempt as seen by the UI.
    Only the controller creates new values; nobody mutates them.
    """

    model_config = ConfigDict(frozen=True)

    status: GenerationStatus = GenerationStatus.IDLE
    message: str = IDLE_MESSAGE
    image_url: Optional[str] = None
    busy: bool = False
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_invariants(self) -> "GenerationState":
        if self.busy != (self.status in BUSY_STATUSES):
            raise ValueError(f"busy={self.busy} does not match status {self.status.value}")
        if (self.image_url is not None) != (self.status is GenerationStatus.READY):
            raise ValueError(f"image_url must be set only when ready (status {self.status.value})")
        return self

    @classmethod
    def idle(cls) -> "GenerationState":
        return cls()

    @classmethod
    def submitting(cls) -> "GenerationState":
        return cls(status=GenerationStatus.SUBMITTING, message=SUBMITTING_MESSAGE, busy=True)

    def waiting(self) -> "GenerationState":
        return GenerationState(status=GenerationStatus.WAITING, message=self.message, busy=True)

    @classmethod
    def ready(cls, image_url: str) -> "GenerationState":
        return cls(status=GenerationStatus.READY, message=DONE_MESSAGE, image_url=image_url)

    @classmethod
    def failed(cls, reason: str) -> "GenerationState":
        return cls(
            status=GenerationStatus.FAILED,
            message=f"Generation failed: {reason}",
            error=reason,
        )


# Wire envelopes of the remote service.
# /gen     -> {"results": {"id": "..."}}
# /check   -> {"results": {"urls": ["...", ...]}}

class SubmitResults(BaseModel):
    id: str = Field(min_length=1)


class SubmitEnvelope(BaseModel):
    results: SubmitResults


class CheckResults(BaseModel):
    urls: List[Annotated[str, Field(min_length=1)]] = Field(min_length=1)


class CheckEnvelope(BaseModel):
    results: CheckResults


class View(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    IMAGE = "image"


def select_view(state: GenerationState) -> View:
    """Pick which of the three screen views renders this state."""
    if state.busy:
        return View.LOADING
    if state.image_url:
        return View.IMAGE
    return View.EMPTY


def status_html(message: str) -> str:
    """Centered status line for the empty view; the message is escaped."""
    return (
        "<p style='text-align:center;color:#ffffff8a;font-size:16px'>"
        f"{html.escape(message)}</p>"
    )
