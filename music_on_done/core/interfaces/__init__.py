"""Interfaces - Protocols for the external collaborators."""

from .collaborators import PlaylistFetcher, StreamResolver, ClipPlayer

__all__ = [
    "PlaylistFetcher",
    "StreamResolver",
    "ClipPlayer",
]
