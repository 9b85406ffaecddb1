# backend/controller.py

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, List, Optional

from config.settings import settings

from .gen_client import GenerationClient, GenerationError
from .model import GenerationState, GenerationStatus
from .utils import get_timestamp_ms, save_image_bytes

logger = logging.getLogger(__name__)

Listener = Callable[[GenerationState], None]


class InvalidStateError(Exception):
    """Intent raised in a state where it has no meaning."""


class GenerationController:
    """
    Owns the GenerationState of the screen and drives one generation at a time:
    submit -> fixed delay -> single check. The UI reads `state` or subscribes,
    and raises intents through `submit` and `download`.
    """

    def __init__(
        self,
        client: Optional[GenerationClient] = None,
        poll_delay: float = settings.POLL_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        output_dir: Optional[Path] = None,
        clock_ms: Callable[[], int] = get_timestamp_ms,
    ):
        self.client = client or GenerationClient()
        self.poll_delay = poll_delay
        self._sleep = sleep
        self.output_dir = Path(output_dir) if output_dir is not None else settings.OUTPUT_DIR
        self._clock_ms = clock_ms
        self._state = GenerationState.idle()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._state.busy

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, new_state: GenerationState) -> None:
        logger.info("State %s -> %s", self._state.status.value, new_state.status.value)
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    async def submit(self, prompt: str) -> None:
        if not prompt or not prompt.strip():
            logger.debug("Ignoring empty prompt")
            return
        if self.busy:
            logger.debug("Ignoring submit while %s", self._state.status.value)
            return

        try:
            self._set_state(GenerationState.submitting())
            job_id = await self.client.submit(prompt)
            self._set_state(self._state.waiting())

            # Fixed wait before the single check, no re-poll.
            await self._sleep(self.poll_delay)

            image_url = await self.client.fetch_result(job_id)
        except GenerationError as e:
            logger.error("Generation failed: %s", e)
            self._set_state(GenerationState.failed(str(e)))
            return
        except BaseException as e:
            # Listeners and cancellation can interrupt the chain; never stay busy.
            logger.exception("Generation interrupted")
            if self._state.busy:
                self._set_state(GenerationState.failed(str(e) or type(e).__name__))
            raise

        self._set_state(GenerationState.ready(image_url))

    async def download(self) -> Path:
        """
        Save the ready image as SkyGen_<ms>.png in the output dir.
        Leaves the generation state untouched.
        """
        if self._state.status is not GenerationStatus.READY:
            raise InvalidStateError(f"Nothing to download in state {self._state.status.value}")

        image_data = await self.client.download(self._state.image_url)
        save_path = save_image_bytes(self.output_dir, image_data, self._clock_ms())
        logger.info("Saved image to %s (%d bytes)", save_path, len(image_data))
        return save_path
