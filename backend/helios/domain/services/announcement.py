"""
Announcement Sink
Fire-and-forget voice cues. At most one utterance is in flight.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from helios.domain.interfaces.tts_provider import TTSProvider
from helios.domain.models.conversation import AudioChunk

logger = logging.getLogger(__name__)

PlaybackCallback = Callable[[AudioChunk], Awaitable[None]]


class AnnouncementSink:
    """
    Vocalizes text through an optional TTS provider.

    speak() never blocks and never raises. Without a provider, or outside
    a running event loop, it does nothing. The busy flag is reported
    through on_busy_change so the session can mirror it.
    """

    def __init__(
        self,
        provider: Optional[TTSProvider] = None,
        voice_id: str = "",
        playback: Optional[PlaybackCallback] = None,
        on_busy_change: Optional[Callable[[bool], None]] = None,
    ):
        self._provider = provider
        self._voice_id = voice_id
        self._playback = playback
        self.on_busy_change = on_busy_change
        self._task: Optional[asyncio.Task] = None
        self._busy = False

    @property
    def available(self) -> bool:
        return self._provider is not None

    @property
    def is_speaking(self) -> bool:
        return self._busy

    def _set_busy(self, busy: bool) -> None:
        self._busy = busy
        if self.on_busy_change is not None:
            self.on_busy_change(busy)

    def speak(self, text: str) -> bool:
        """
        Start vocalizing text, cancelling any utterance in progress.

        Returns:
            True if an utterance was started
        """
        if self._provider is None or not text.strip():
            return False

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop - voice cue skipped")
            return False

        self.cancel()
        self._set_busy(True)
        task = loop.create_task(self._run(text))
        self._task = task
        task.add_done_callback(self._on_done)
        return True

    def cancel(self) -> None:
        """Stop the in-flight utterance, if any"""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        if self._busy:
            self._set_busy(False)

    async def _run(self, text: str) -> None:
        async for chunk in self._provider.stream_synthesize(text, self._voice_id):
            if self._playback is not None:
                await self._playback(chunk)

    def _on_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            logger.debug("Voice cue cancelled")
        elif task.exception() is not None:
            logger.error(f"Voice cue failed: {task.exception()}")

        # A newer utterance may already own the busy flag
        if self._task is task:
            self._task = None
            self._set_busy(False)

    async def close(self) -> None:
        self.cancel()
        if self._provider is not None:
            await self._provider.cleanup()
