import logging
from threading import Lock
from typing import Iterable, Literal, Optional

from src.core.common.errors import UnauthorizedError

logger = logging.getLogger(__name__)

TreasuryRole = Literal["ADMINISTRATOR", "MANAGER"]


def _normalize_identity(identity: str) -> str:
    return identity.strip()


class AuthorizationGate:
    """
    Capability lookup over two roles.
    Administrators are implicitly managers; membership is a plain set query.
    Identities are stripped on the way in and blank identities never hold a role.
    """

    def __init__(
        self,
        *,
        administrators: Iterable[str],
        managers: Optional[Iterable[str]] = None,
    ) -> None:
        self._lock = Lock()
        self._members: dict[TreasuryRole, set[str]] = {
            "ADMINISTRATOR": _identity_set(administrators),
            "MANAGER": _identity_set(managers or ()),
        }

    def has_role(self, identity: str, role: TreasuryRole) -> bool:
        with self._lock:
            return identity in self._members[role]

    def is_administrator(self, identity: str) -> bool:
        return self.has_role(identity, "ADMINISTRATOR")

    def is_manager(self, identity: str) -> bool:
        return self.has_role(identity, "MANAGER") or self.is_administrator(identity)

    def require_manager(self, identity: str) -> None:
        if not self.is_manager(identity):
            logger.warning("Manager capability denied. actor=%s", identity)
            raise UnauthorizedError("UNAUTHORIZED: manager role required")

    def require_administrator(self, identity: str) -> None:
        if not self.is_administrator(identity):
            logger.warning("Administrator capability denied. actor=%s", identity)
            raise UnauthorizedError("UNAUTHORIZED: administrator role required")

    def grant_manager(self, *, actor_id: str, identity: str) -> bool:
        self.require_administrator(actor_id)
        identity = _normalize_identity(identity)
        if not identity:
            logger.warning("Manager grant ignored for blank identity. actor=%s", actor_id)
            return False
        with self._lock:
            if identity in self._members["MANAGER"]:
                return False
            self._members["MANAGER"].add(identity)
        logger.info("Manager granted. actor=%s identity=%s", actor_id, identity)
        return True

    def revoke_manager(self, *, actor_id: str, identity: str) -> bool:
        self.require_administrator(actor_id)
        identity = _normalize_identity(identity)
        with self._lock:
            if identity not in self._members["MANAGER"]:
                return False
            self._members["MANAGER"].discard(identity)
        logger.info("Manager revoked. actor=%s identity=%s", actor_id, identity)
        return True

    def members(self, role: TreasuryRole) -> list[str]:
        with self._lock:
            return sorted(self._members[role])


def _identity_set(identities: Iterable[str]) -> set[str]:
    normalized = (_normalize_identity(value) for value in identities)
    return {value for value in normalized if value}
