from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .exceptions import BadArgumentError

Listener = Callable[..., Any]

CHART_EVENTS: Tuple[str, ...] = (
    "preRender",
    "postRender",
    "preRedraw",
    "postRedraw",
    "filtered",
    "zoomed",
    "renderlet",
    "pretransition",
)


class EventDispatcher:
    """
    Named channels of synchronous listeners.

    Listeners are addressed as 'channel' or 'channel.key'. Registering again under
    the same address replaces the previous listener in place; other listeners on
    the channel keep their order. Listeners cannot stop propagation.
    """

    def __init__(self, *channels: str):
        self._channels: Dict[str, Dict[str, Listener]] = {}
        self.add_channels(channels)

    def add_channel(self, channel: str) -> None:
        if not channel or "." in channel:
            raise BadArgumentError(f"Illegal event channel name: {channel!r}")
        self._channels.setdefault(channel, {})

    def add_channels(self, channels: Iterable[str]) -> None:
        for channel in channels:
            self.add_channel(channel)

    def channels(self) -> Tuple[str, ...]:
        return tuple(self._channels)

    def _parse(self, typename: str) -> Tuple[str, str]:
        channel, _, key = typename.partition(".")
        if channel not in self._channels:
            raise BadArgumentError(f"Unknown event channel: {channel!r}")
        return channel, key

    def on(self, typename: str, listener: Optional[Listener] = None, *, remove: bool = False) -> Optional[Listener]:
        """
        Register, replace, remove or look up a listener.

        - on("renderlet.outline", fn): register / replace
        - on("renderlet.outline", remove=True): remove
        - on("renderlet.outline"): return the current listener (or None)
        """
        channel, key = self._parse(typename)
        listeners = self._channels[channel]
        if remove:
            listeners.pop(key, None)
            return None
        if listener is None:
            return listeners.get(key)
        if not callable(listener):
            raise BadArgumentError(f"Listener for {typename!r} is not callable: {listener!r}")
        listeners[key] = listener
        return listener

    def listeners(self, channel: str) -> Tuple[Listener, ...]:
        channel, _ = self._parse(channel)
        return tuple(self._channels[channel].values())

    def call(self, channel: str, *args: Any) -> None:
        # snapshot so listeners may (de)register while being called
        for listener in self.listeners(channel):
            listener(*args)
