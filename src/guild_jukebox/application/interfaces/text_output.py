"""Port interface for posting and editing status text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class TextOutput(ABC):
    """Interface for the text channel a session reports to."""

    @abstractmethod
    async def send(self, text: str) -> Any:
        """Post a new message and return a handle that can be passed to ``edit``."""
        ...

    @abstractmethod
    async def edit(self, handle: Any, text: str) -> None:
        """Replace the content of a previously sent message.

        Raises:
            MessageGoneError: The message was deleted externally.
        """
        ...
