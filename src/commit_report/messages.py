from __future__ import annotations

from typing import Protocol

from .config import ConfigurationError

MIN_MESSAGE_LENGTH = 5


class MessageProvider(Protocol):
    def get_message(self) -> str: ...


class StaticMessageProvider:
    def __init__(self, message: str) -> None:
        self.message = message

    def get_message(self) -> str:
        return self.message


class PromptMessageProvider:
    def __init__(self, prompt: str = "Commit message: ") -> None:
        self.prompt = prompt

    def get_message(self) -> str:
        try:
            return input(self.prompt)
        except EOFError:
            return ""


def obtain_commit_message(provider: MessageProvider) -> str:
    message = (provider.get_message() or "").strip()
    if len(message) < MIN_MESSAGE_LENGTH:
        raise ConfigurationError(f"Commit message must be at least {MIN_MESSAGE_LENGTH} characters, got {message!r}.")
    return message
