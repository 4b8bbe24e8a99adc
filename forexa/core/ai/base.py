"""Generative model interface used by the prediction engine."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class GenerativeModel(Protocol):
    """A single prompt-completion call returning free-form text.

    Implementations raise :class:`~forexa.core.exceptions.ModelInvocationError`
    when the call itself fails.
    """

    model_id: str

    async def generate(self, prompt: str) -> str: ...

    async def close(self) -> None: ...
