"""Matrix application-service transport — talks to a homeserver over HTTP."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any
from urllib.parse import quote
from uuid import uuid4

from smsbridge.config import SmsBridgeConfig
from smsbridge.core.errors import TransportError
from smsbridge.models.room import Profile, RoomConfig
from smsbridge.telemetry.base import Attr, SpanKind, TelemetryProvider
from smsbridge.telemetry.noop import NoopTelemetryProvider
from smsbridge.transport.base import BridgeTransport

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger("smsbridge.transport.matrix")

_CLIENT = "/_matrix/client/v3"
_MEDIA = "/_matrix/media/v3"


def _q(value: str) -> str:
    return quote(value, safe="")


class MatrixAppserviceTransport(BridgeTransport):
    """Client-server API calls made with the appservice token.

    Calls on behalf of virtual users use ``user_id`` masquerading; virtual
    users are registered lazily the first time they act.
    """

    def __init__(
        self,
        config: SmsBridgeConfig,
        *,
        client: httpx.AsyncClient | None = None,
        telemetry: TelemetryProvider | None = None,
    ) -> None:
        try:
            import httpx as _httpx
        except ImportError as exc:
            raise ImportError(
                "httpx is required for MatrixAppserviceTransport. "
                "Install it with: pip install smsbridge[matrix]"
            ) from exc
        self._config = config
        self._httpx = _httpx
        self._client: httpx.AsyncClient = client or _httpx.AsyncClient(
            base_url=config.homeserver.url,
            timeout=config.request_timeout,
        )
        self._telemetry = telemetry or NoopTelemetryProvider()
        self._registered: set[str] = {config.bot_user_id}

    @property
    def bot_user_id(self) -> str:
        return self._config.bot_user_id

    async def get_joined_rooms(self) -> list[str]:
        data = await self._request("GET", f"{_CLIENT}/joined_rooms")
        return list(data.get("joined_rooms", []))

    async def get_joined_members(self, room_id: str) -> set[str]:
        data = await self._request(
            "GET", f"{_CLIENT}/rooms/{_q(room_id)}/joined_members", room_id=room_id
        )
        return set(data.get("joined", {}))

    async def create_room(self, config: RoomConfig) -> str:
        payload: dict[str, Any] = {
            "invite": config.invitees,
            "visibility": config.visibility,
            "preset": config.preset,
            "is_direct": config.is_direct,
            "initial_state": [state.model_dump() for state in config.initial_state],
        }
        if config.name:
            payload["name"] = config.name
        data = await self._request("POST", f"{_CLIENT}/createRoom", json=payload)
        room_id = data.get("room_id")
        if not room_id:
            raise TransportError("createRoom response did not include a room_id")
        return str(room_id)

    async def join_room_as(self, user_id: str, room_id: str) -> None:
        await self._ensure_registered(user_id)
        await self._request(
            "POST",
            f"{_CLIENT}/rooms/{_q(room_id)}/join",
            json={},
            as_user=user_id,
            room_id=room_id,
        )

    async def send_text(self, room_id: str, text: str) -> None:
        txn_id = uuid4().hex
        await self._request(
            "PUT",
            f"{_CLIENT}/rooms/{_q(room_id)}/send/m.room.message/{txn_id}",
            json={"msgtype": "m.notice", "body": text},
            room_id=room_id,
        )

    async def set_profile(
        self,
        user_id: str,
        *,
        display_name: str | None = None,
        avatar_ref: str | None = None,
    ) -> None:
        await self._ensure_registered(user_id)
        if display_name is not None:
            await self._request(
                "PUT",
                f"{_CLIENT}/profile/{_q(user_id)}/displayname",
                json={"displayname": display_name},
                as_user=user_id,
            )
        if avatar_ref is not None:
            mxc = avatar_ref
            if not avatar_ref.startswith("mxc://"):
                mxc = await self.upload_from_url(avatar_ref)
                logger.debug("Avatar MXC URL = %s", mxc)
            await self._request(
                "PUT",
                f"{_CLIENT}/profile/{_q(user_id)}/avatar_url",
                json={"avatar_url": mxc},
                as_user=user_id,
            )

    async def get_profile(self, user_id: str) -> Profile:
        try:
            data = await self._request("GET", f"{_CLIENT}/profile/{_q(user_id)}")
        except TransportError as exc:
            if exc.status_code == 404:
                return Profile(user_id=user_id)
            raise
        return Profile(
            user_id=user_id,
            display_name=data.get("displayname"),
            avatar_ref=data.get("avatar_url"),
        )

    async def upload_from_url(self, url: str) -> str:
        """Download *url* and re-upload it to the homeserver media repository."""
        try:
            resp = await self._client.get(url, follow_redirects=True)
            resp.raise_for_status()
        except self._httpx.HTTPError as exc:
            raise TransportError(f"Failed to download {url}: {exc}") from exc

        content_type = resp.headers.get("content-type", "application/octet-stream")
        data = await self._request(
            "POST",
            f"{_MEDIA}/upload",
            content=resp.content,
            headers={"Content-Type": content_type},
        )
        content_uri = data.get("content_uri")
        if not content_uri:
            raise TransportError("Media upload response did not include a content_uri")
        return str(content_uri)

    async def close(self) -> None:
        await self._client.aclose()

    # -- internals --

    async def _ensure_registered(self, user_id: str) -> None:
        if user_id in self._registered:
            return
        localpart = user_id[1:].split(":", 1)[0]
        try:
            await self._request(
                "POST",
                f"{_CLIENT}/register",
                json={"type": "m.login.application_service", "username": localpart},
                user_id=user_id,
            )
        except TransportError as exc:
            if exc.status_code != 400 or "M_USER_IN_USE" not in str(exc):
                raise
        self._registered.add(user_id)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        as_user: str | None = None,
        room_id: str | None = None,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        params = {"user_id": as_user} if as_user else None
        request_headers = {
            "Authorization": f"Bearer {self._config.as_token.get_secret_value()}",
            **(headers or {}),
        }
        span_id = self._telemetry.start_span(
            SpanKind.TRANSPORT_REQUEST,
            f"{method} {path.split('?', 1)[0]}",
            attributes={Attr.TRANSPORT_METHOD: method, Attr.TRANSPORT_PATH: path},
            room_id=room_id,
        )
        t0 = time.monotonic()
        try:
            resp = await self._client.request(
                method,
                path,
                params=params,
                json=json,
                content=content,
                headers=request_headers,
            )
            resp.raise_for_status()
        except self._httpx.TimeoutException as exc:
            self._telemetry.end_span(span_id, status="error", error_message="timeout")
            raise TransportError(
                f"{method} {path} timed out", room_id=room_id, user_id=as_user or user_id
            ) from exc
        except self._httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self._telemetry.end_span(
                span_id,
                status="error",
                error_message=str(status),
                attributes={Attr.TRANSPORT_STATUS: status},
            )
            raise TransportError(
                f"{method} {path} failed: {self._describe_error(exc.response)}",
                room_id=room_id,
                user_id=as_user or user_id,
                status_code=status,
            ) from exc
        except self._httpx.HTTPError as exc:
            self._telemetry.end_span(span_id, status="error", error_message=str(exc))
            raise TransportError(
                f"{method} {path} failed: {exc}", room_id=room_id, user_id=as_user or user_id
            ) from exc

        self._telemetry.end_span(span_id, attributes={Attr.TRANSPORT_STATUS: resp.status_code})
        self._telemetry.record_metric(
            "smsbridge.transport.request_ms",
            (time.monotonic() - t0) * 1000,
            unit="ms",
            attributes={Attr.TRANSPORT_METHOD: method},
        )
        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(
                f"{method} {path} returned a non-JSON body",
                room_id=room_id,
                user_id=as_user or user_id,
                status_code=resp.status_code,
            ) from exc
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _describe_error(resp: Any) -> str:
        """Extract ``errcode: error`` from a Matrix error body when available."""
        try:
            body = resp.json()
        except ValueError:
            return f"HTTP {resp.status_code}"
        if isinstance(body, dict) and body.get("errcode"):
            return f"{body['errcode']}: {body.get('error', '')}".rstrip(": ")
        return f"HTTP {resp.status_code}"
