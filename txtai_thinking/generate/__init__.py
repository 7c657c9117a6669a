# Generator package

# Makes generate/ importable and exposes key interfaces.

from .generator import ChatGenerator
from .types import Message, ChatResponse, ModelParams, PromptModifier, MessageListener
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "ChatGenerator",
    "Message",
    "ChatResponse",
    "ModelParams",
    "PromptModifier",
    "MessageListener",
    "EchoDevClient",
]
