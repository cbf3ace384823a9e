"""LingoLive Support: realtime multilingual support chat backend."""

__version__ = "1.0.0"
