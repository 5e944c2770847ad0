"""
music-on-done - ambient clip notifications from a YouTube playlist.

Structure:
- core/      - config, caches, collaborator protocols and adapters, errors
- common/    - logging, shared value types
- modules/   - debounce, playback, the invocation flow
"""

__version__ = "1.0.0"
