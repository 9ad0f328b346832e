"""Transcript source adapters."""

from podcast_playlist.infrastructure.transcripts.file_source import FileTranscriptSource

__all__ = ["FileTranscriptSource"]
