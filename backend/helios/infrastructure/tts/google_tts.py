"""
Google Cloud TTS Provider Implementation
Vocalizes voice cues with Chirp 3: HD voices over the REST API
"""
import base64
import os
import aiohttp
from typing import AsyncIterator, Dict, Optional
from helios.domain.interfaces.tts_provider import TTSProvider
from helios.domain.models.conversation import AudioChunk


class GoogleTTSProvider(TTSProvider):
    """Google Cloud TTS provider using Chirp 3: HD voices"""

    # Google Cloud TTS REST API endpoint
    TTS_API_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"

    # ~1024 16-bit samples per chunk
    CHUNK_SIZE = 2048

    def __init__(self):
        self._api_key: Optional[str] = None
        self._config: Dict = {}
        self._default_voice: str = "en-US-Chirp3-HD-Kore"
        self._default_language: str = "en-US"
        self._sample_rate: int = 24000
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self, config: dict) -> None:
        """Initialize Google TTS client with configuration"""
        self._config = config
        self._api_key = config.get("api_key") or os.getenv("GOOGLE_TTS_API_KEY")

        if not self._api_key:
            raise ValueError("Google TTS API key not found in config or GOOGLE_TTS_API_KEY environment variable")

        self._default_voice = config.get("voice_id", self._default_voice)
        self._default_language = config.get("language_code", self._default_language)
        self._sample_rate = config.get("sample_rate", self._sample_rate)

        self._session = aiohttp.ClientSession()

    async def stream_synthesize(
        self,
        text: str,
        voice_id: str,
        sample_rate: int = 0,
        **kwargs
    ) -> AsyncIterator[AudioChunk]:
        """
        Synthesize a voice cue

        Args:
            text: Text to synthesize
            voice_id: Voice identifier ("en-US-Chirp3-HD-Kore" or just "Kore")
            sample_rate: Audio sample rate, provider default when 0

        Yields:
            AudioChunk: LINEAR16 PCM chunks
        """
        if not self._session:
            raise RuntimeError("Google TTS client not initialized. Call initialize() first.")

        sample_rate = sample_rate or self._sample_rate
        request_payload = {
            "input": {"text": text},
            "voice": {
                "languageCode": kwargs.get("language_code", self._default_language),
                "name": self._normalize_voice_id(voice_id),
            },
            "audioConfig": {
                "audioEncoding": "LINEAR16",
                "sampleRateHertz": sample_rate,
                "speakingRate": kwargs.get("speaking_rate", 1.0),
            },
        }

        url = f"{self.TTS_API_URL}?key={self._api_key}"

        try:
            async with self._session.post(url, json=request_payload) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(f"Google TTS API error ({response.status}): {error_text}")
                result = await response.json()
        except aiohttp.ClientError as e:
            raise RuntimeError(f"Google TTS network error: {str(e)}")

        audio_content = base64.b64decode(result["audioContent"])
        for i in range(0, len(audio_content), self.CHUNK_SIZE):
            yield AudioChunk(
                data=audio_content[i:i + self.CHUNK_SIZE],
                sample_rate=sample_rate,
                channels=1,
            )

    def _normalize_voice_id(self, voice_id: str) -> str:
        """Expand short voice names to the full Chirp 3: HD format"""
        if not voice_id:
            return self._default_voice
        if "Chirp3-HD" in voice_id:
            return voice_id
        return f"{self._default_language}-Chirp3-HD-{voice_id}"

    async def cleanup(self) -> None:
        """Release resources"""
        if self._session:
            await self._session.close()
            self._session = None

    @property
    def name(self) -> str:
        """Provider name"""
        return "google"

    @property
    def default_voice(self) -> str:
        return self._default_voice

    def __repr__(self) -> str:
        return f"GoogleTTSProvider(voice={self._default_voice}, language={self._default_language})"
