"""
Core - Application infrastructure.

- config/      - Settings, per-project overrides
- cache/       - Playlist and stream pool caches
- interfaces/  - Protocols for the external collaborators
- adapters/    - yt-dlp and mpv implementations
- errors       - Error hierarchy
"""
