"""A long-polling Bayeux client for streaming channels."""

from __future__ import annotations

import json
import re
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

VERSION = "1.0"
MINIMUM_VERSION = "1.0"
DEFAULT_URL = "/cometd/36.0"

_GLOB_PIECE = re.compile(r"\\(.)|(\*\*)|(\*)|(\?)|(\\)|([^\\*?]+)", re.DOTALL)


class BayeuxError(Exception):
    """A Bayeux request failed or was refused by the server."""


@dataclass
class Message:
    """A message delivered to subscribers."""

    channel: str
    data: Any = None
    id: str = ""
    client_id: str = ""
    ext: Any = None

    @classmethod
    def _from_json(cls, obj: dict[str, Any]) -> Message:
        return cls(
            channel=obj.get("channel", ""),
            data=obj.get("data"),
            id=obj.get("id", "") or "",
            client_id=obj.get("clientId", "") or "",
            ext=obj.get("ext"),
        )


def _compile_glob(pattern: str) -> re.Pattern[str]:
    parts = []
    for match in _GLOB_PIECE.finditer(pattern):
        escaped, globstar, star, question, trailing, literal = match.groups()
        if escaped is not None:
            parts.append(re.escape(escaped))
        elif globstar:
            parts.append(".*")
        elif star:
            parts.append("[^/]*")
        elif question:
            parts.append("[^/]")
        elif trailing:
            raise BayeuxError(f"Invalid pattern: trailing escape in {pattern!r}")
        else:
            parts.append(re.escape(literal))
    return re.compile("".join(parts), re.DOTALL)


def channel_matches(pattern: str, channel: str) -> bool:
    """Match a channel name against a glob; "*" stays within a segment, "**" spans segments."""
    return _compile_glob(pattern).fullmatch(channel) is not None


@dataclass
class _Subscription:
    glob: re.Pattern[str]
    out: Callable[[Message], Any]


class Client:
    """Connects to a Bayeux server and dispatches channel messages to subscribers.

    ``post`` sends a request body to a URL and returns the response body.
    """

    def __init__(self, post: Callable[[str, str], str | bytes], url: str = DEFAULT_URL) -> None:
        self._post = post
        self.url = url
        self.client_id = ""
        self.connected = False
        self._lock = threading.RLock()
        self._subscriptions: list[_Subscription] = []
        self._messages: deque[Message] = deque()

    def connect(self) -> None:
        """Perform the handshake unless already connected."""
        with self._lock:
            if self.connected:
                return
            reply = self._send({
                "channel": "/meta/handshake",
                "version": VERSION,
                "minimumVersion": MINIMUM_VERSION,
                "supportedConnectionTypes": ["long-polling"],
            })
            self._check(reply)
            self.client_id = reply.get("clientId", "") or ""
            self.connected = True

    def close(self) -> None:
        """Tell the server the client is disconnecting."""
        with self._lock:
            self.connected = False
            reply = self._send({"channel": "/meta/disconnect", "clientId": self.client_id})
            self._check(reply)

    def subscribe(self, pattern: str, out: Callable[[Message], Any], ext: Any = None) -> None:
        """Subscribe to channels matching pattern; matching messages are passed to out."""
        self.connect()
        glob = _compile_glob(pattern)
        reply = self._send({
            "channel": "/meta/subscribe",
            "clientId": self.client_id,
            "subscription": pattern,
            "ext": ext,
        })
        self._check(reply)
        with self._lock:
            self._subscriptions.append(_Subscription(glob=glob, out=out))

    def unsubscribe(self, pattern: str) -> None:
        """Cancel a subscription on the server."""
        reply = self._send({
            "channel": "/meta/unsubscribe",
            "clientId": self.client_id,
            "subscription": pattern,
        })
        self._check(reply)

    def poll(self) -> list[Message]:
        """Make one long-polling connect request and deliver every pending message.

        Returns the messages that were dispatched.
        """
        self._send({
            "channel": "/meta/connect",
            "clientId": self.client_id,
            "connectionType": "long-polling",
        })
        delivered = []
        with self._lock:
            while self._messages:
                message = self._messages.popleft()
                for subscription in self._subscriptions:
                    if subscription.glob.fullmatch(message.channel):
                        subscription.out(message)
                delivered.append(message)
        return delivered

    @staticmethod
    def _check(reply: dict[str, Any]) -> None:
        if reply.get("successful") is not True:
            raise BayeuxError(reply.get("error", "") or "")

    def _send(self, request: dict[str, Any]) -> dict[str, Any]:
        body = {
            key: value
            for key, value in request.items()
            if key == "channel" or value not in (None, "", [])
        }
        result = self._post(self.url, json.dumps([body]))
        try:
            messages = json.loads(result)
        except json.JSONDecodeError as err:
            raise BayeuxError(f"invalid response: {err}") from err
        if not isinstance(messages, list):
            raise BayeuxError("invalid response: expected a list of messages")
        reply = None
        for message in messages:
            if message.get("channel") == request["channel"]:
                reply = message
            else:
                with self._lock:
                    self._messages.append(Message._from_json(message))
        if reply is None:
            raise BayeuxError(f"no reply on channel {request['channel']}")
        return reply