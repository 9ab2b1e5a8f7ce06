"""Socket.IO live chat: handlers register on the shared `socketio` extension when imported."""
from . import chat  # noqa: F401
