"""
Adapters - external commands behind the collaborator protocols.

- ytdlp.py: playlist metadata fetch, stream URL resolution
- mpv.py:   clip playback
"""

from .process import run_command, command_exists, check_dependencies, CommandResult
from .ytdlp import YtDlpPlaylistFetcher, YtDlpStreamResolver, parse_playlist_json
from .mpv import MpvClipPlayer, build_mpv_args

__all__ = [
    "run_command",
    "command_exists",
    "check_dependencies",
    "CommandResult",
    "YtDlpPlaylistFetcher",
    "YtDlpStreamResolver",
    "parse_playlist_json",
    "MpvClipPlayer",
    "build_mpv_args",
]
