"""Mapping between phone numbers and the bridge's virtual chat identities."""

from __future__ import annotations

VIRTUAL_LOCALPART_PREFIX = "_sms_"


class VirtualIdentityResolver:
    """Derives virtual SMS identities from phone numbers and recognises them.

    A phone number ``15551234567`` on domain ``example.org`` is represented by
    ``@_sms_15551234567:example.org``. The mapping is pure: no I/O, no state
    beyond the bot identity and domain it was built with.
    """

    def __init__(self, bot_user_id: str, domain: str) -> None:
        self._bot_user_id = bot_user_id
        self._domain = domain
        self._prefix = f"@{VIRTUAL_LOCALPART_PREFIX}"
        self._suffix = f":{domain}"

    @property
    def bot_user_id(self) -> str:
        return self._bot_user_id

    @property
    def domain(self) -> str:
        return self._domain

    def localpart_for_number(self, phone_number: str) -> str:
        return f"{VIRTUAL_LOCALPART_PREFIX}{phone_number}"

    def identity_for_number(self, phone_number: str) -> str:
        """Return the virtual identity for *phone_number* (digits, no ``+``)."""
        return f"@{self.localpart_for_number(phone_number)}{self._suffix}"

    def number_for_identity(self, identity: object) -> str | None:
        """Inverse of :meth:`identity_for_number`, or ``None`` if not virtual."""
        if not self.is_virtual(identity):
            return None
        assert isinstance(identity, str)
        number = identity[len(self._prefix) : -len(self._suffix)]
        return number or None

    def is_virtual(self, identity: object) -> bool:
        if not isinstance(identity, str):
            return False
        return identity.startswith(self._prefix) and identity.endswith(self._suffix)

    def is_bridge_controlled(self, identity: object) -> bool:
        """True for the bridge bot and for any virtual SMS identity.

        Never raises: anything that is not a string is simply not ours.
        """
        if not isinstance(identity, str) or not identity:
            return False
        return identity == self._bot_user_id or self.is_virtual(identity)
