"""Narration coordination - one utterance in flight at a time.

The speech engine is an external collaborator: `speak` returns immediately
and completion arrives later through a callback. Every request gets a token;
completion callbacks carrying a stale token are ignored, so a natural end
racing a user stop (or a newer request) cannot corrupt the current state.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from daytrip.app.errors import NarrationUnavailableError
from daytrip.app.models.itinerary import Activity
from daytrip.app.utils.logging import StructuredEngineLogger
from daytrip.app.utils.metrics import PrometheusEngineMetrics

logger = logging.getLogger(__name__)


class SpeechEngine(Protocol):
    """Text-to-speech collaborator."""

    def speak(self, text: str, lang: str, rate: float, on_end: Callable[[], None]) -> None:
        """Start speaking text; call on_end when speech finishes naturally."""
        ...

    def cancel(self) -> None:
        """Stop any speech in progress."""
        ...


class FinishReason(str, Enum):
    """Why a narration stopped being in flight."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"
    PREEMPTED = "preempted"


@dataclass
class _Narration:
    token: int
    channel: str
    on_finish: Callable[[FinishReason], None] | None


class NarrationCoordinator:
    """Central gate in front of the speech engine."""

    def __init__(
        self,
        engine: SpeechEngine | None,
        structured_logger: StructuredEngineLogger | None = None,
        metrics: PrometheusEngineMetrics | None = None,
    ) -> None:
        self._engine = engine
        self._logger = structured_logger or StructuredEngineLogger()
        self._metrics = metrics or PrometheusEngineMetrics()
        self._next_token = 0
        self._active: _Narration | None = None

    @property
    def available(self) -> bool:
        return self._engine is not None

    @property
    def active_token(self) -> int | None:
        return self._active.token if self._active else None

    @property
    def active_channel(self) -> str | None:
        return self._active.channel if self._active else None

    def request(
        self,
        text: str,
        lang: str,
        rate: float,
        channel: str,
        on_finish: Callable[[FinishReason], None] | None = None,
    ) -> int | None:
        """Cancel whatever is playing, then narrate text.

        The preempted owner is told only after the new narration is in
        flight, so a request made from its on_finish preempts this one in
        turn instead of running alongside it.

        Returns:
            Token of the new narration, or None if no engine could take it
        """
        preempted = self._detach_active(FinishReason.PREEMPTED, cancel_engine=True)

        try:
            if self._engine is None:
                raise NarrationUnavailableError("no speech engine configured")
            self._next_token += 1
            token = self._next_token
            self._active = _Narration(token=token, channel=channel, on_finish=on_finish)
            self._engine.speak(text, lang, rate, on_end=lambda: self._on_engine_end(token))
        except Exception as e:
            self._active = None
            self._logger.log_narration(channel, "unavailable", lang=lang, error_reason=str(e))
            self._notify(preempted, FinishReason.PREEMPTED)
            return None

        self._metrics.inc_narration(channel)
        self._logger.log_narration(channel, "started", token=token, lang=lang)
        self._notify(preempted, FinishReason.PREEMPTED)
        return token

    def cancel(self, token: int | None = None) -> bool:
        """Cancel the in-flight narration.

        Args:
            token: Only cancel if this token is still the active one

        Returns:
            True if something was cancelled
        """
        if self._active is None:
            return False
        if token is not None and self._active.token != token:
            return False
        cancelled = self._detach_active(FinishReason.CANCELLED, cancel_engine=True)
        self._notify(cancelled, FinishReason.CANCELLED)
        return cancelled is not None

    def _on_engine_end(self, token: int) -> None:
        if self._active is None or self._active.token != token:
            logger.debug(f"[narration] Ignoring stale completion for token={token}")
            return
        completed = self._detach_active(FinishReason.COMPLETED, cancel_engine=False)
        self._notify(completed, FinishReason.COMPLETED)

    def _detach_active(self, reason: FinishReason, cancel_engine: bool) -> _Narration | None:
        active, self._active = self._active, None
        if active is None:
            return None
        if cancel_engine and self._engine is not None:
            try:
                self._engine.cancel()
            except Exception as e:
                logger.warning(f"[narration] Speech engine cancel failed: {e}")
        self._logger.log_narration(active.channel, reason.value, token=active.token)
        return active

    @staticmethod
    def _notify(narration: _Narration | None, reason: FinishReason) -> None:
        if narration is not None and narration.on_finish is not None:
            narration.on_finish(reason)


class AudioGuideState(str, Enum):
    """Audio-guide session state."""

    CLOSED = "closed"
    STOPPED = "stopped"
    PLAYING = "playing"


class AudioGuideSession:
    """Per-activity narration session: CLOSED -> STOPPED <-> PLAYING."""

    channel = "audio_guide"

    def __init__(self, coordinator: NarrationCoordinator, lang: str = "es-ES", rate: float = 0.95) -> None:
        self._coordinator = coordinator
        self._lang = lang
        self._rate = rate
        self._state = AudioGuideState.CLOSED
        self._activity: Activity | None = None
        self._token: int | None = None

    @property
    def state(self) -> AudioGuideState:
        return self._state

    @property
    def activity(self) -> Activity | None:
        return self._activity

    @property
    def is_playing(self) -> bool:
        return self._state == AudioGuideState.PLAYING

    def open(self, activity: Activity) -> None:
        """Open the session for an activity that carries narration text.

        Raises:
            ValueError: If the activity has no audio guide text
        """
        if not activity.has_audio_guide:
            raise ValueError(f"activity {activity.id} has no audio guide text")
        self.close()
        self._activity = activity
        self._state = AudioGuideState.STOPPED

    def play(self) -> bool:
        """Start narrating the open activity. Only valid while STOPPED."""
        if self._state != AudioGuideState.STOPPED or self._activity is None:
            return False
        token = self._coordinator.request(
            self._activity.audio_guide_text or "",
            self._lang,
            self._rate,
            channel=self.channel,
            on_finish=self._on_finish,
        )
        if token is None:
            return False
        if self._coordinator.active_token == token:
            # Engines may finish synchronously inside speak()
            self._token = token
            self._state = AudioGuideState.PLAYING
        return True

    def stop(self) -> None:
        """Stop narration, keeping the session open."""
        if self._state != AudioGuideState.PLAYING:
            return
        self._coordinator.cancel(self._token)
        # on_finish already moved us to STOPPED unless the token went stale
        self._token = None
        self._state = AudioGuideState.STOPPED

    def toggle(self) -> AudioGuideState:
        """Play/stop button."""
        if self._state == AudioGuideState.PLAYING:
            self.stop()
        else:
            self.play()
        return self._state

    def close(self) -> None:
        """Cancel any narration in flight and close the session."""
        self._coordinator.cancel()
        self._token = None
        self._activity = None
        self._state = AudioGuideState.CLOSED

    def _on_finish(self, reason: FinishReason) -> None:
        if self._state == AudioGuideState.PLAYING:
            self._token = None
            self._state = AudioGuideState.STOPPED


class PhrasePlayer:
    """Phrasebook pronunciation, sharing the narration gate with the audio guide."""

    channel = "phrase"

    def __init__(self, coordinator: NarrationCoordinator, lang: str = "it-IT", rate: float = 0.85) -> None:
        self._coordinator = coordinator
        self._lang = lang
        self._rate = rate
        self._playing: str | None = None
        self._token: int | None = None

    @property
    def playing(self) -> str | None:
        """Phrase currently being pronounced."""
        return self._playing

    def play(self, phrase: str) -> bool:
        """Pronounce phrase, cancelling any narration in flight."""
        token = self._coordinator.request(
            phrase, self._lang, self._rate, channel=self.channel, on_finish=self._make_on_finish(phrase)
        )
        if token is None:
            return False
        if self._coordinator.active_token == token:
            self._token = token
            self._playing = phrase
        return True

    def stop(self) -> None:
        """Stop the phrase being pronounced."""
        if self._token is not None:
            self._coordinator.cancel(self._token)

    def _make_on_finish(self, phrase: str) -> Callable[[FinishReason], None]:
        def on_finish(reason: FinishReason) -> None:
            if self._playing == phrase:
                self._playing = None
                self._token = None

        return on_finish
