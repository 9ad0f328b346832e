"""Port interface for obtaining transcript text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.mentions.transcript import TranscriptText


class TranscriptSource(ABC):
    """Interface for fetching the transcript of an episode or video."""

    @abstractmethod
    async def get_transcript(self, identifier: str) -> TranscriptText:
        """Fetch a transcript.

        Raises:
            TranscriptUnavailable: If no transcript exists or it cannot be read.
        """
        ...
