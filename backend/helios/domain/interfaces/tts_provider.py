"""
Voice Cue Provider Interface
Speech backends the AnnouncementSink reads script steps through
"""
from abc import ABC, abstractmethod
from typing import AsyncIterator
from helios.domain.models.conversation import AudioChunk


class TTSProvider(ABC):
    """
    Speech backend for voice cues.

    The sink drives one utterance at a time and may cancel it mid-stream
    when the agent asks for the next cue or the session resets, so
    stream_synthesize must tolerate being abandoned between chunks.
    Failures surface as exceptions from the iterator; the sink logs them
    and clears its busy flag.
    """

    @abstractmethod
    async def initialize(self, config: dict) -> None:
        """
        Prepare the backend from its `providers.tts.<name>` config block.

        Raises:
            ValueError: Required settings (credentials) are missing
            RuntimeError: The backend cannot be reached
        """

    @abstractmethod
    def stream_synthesize(
        self,
        text: str,
        voice_id: str,
        sample_rate: int = 16000,
        **kwargs
    ) -> AsyncIterator[AudioChunk]:
        """
        Speak a cue such as "Discovery. How is your team handling routing?"

        Args:
            text: Step title and agent prompt
            voice_id: Configured voice, empty for the backend default
            sample_rate: Requested PCM rate in Hz

        Yields:
            AudioChunk: Audio for the playback callback, in order
        """

    @abstractmethod
    async def cleanup(self) -> None:
        """Close sessions on console shutdown"""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key used in `providers.tts.active`"""
