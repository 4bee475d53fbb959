"""LifeAssist: ask a chat-completion model about the notes in your vault."""

__version__ = "0.3.0"
