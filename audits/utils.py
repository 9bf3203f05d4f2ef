import hashlib
import hmac
from dataclasses import dataclass
from typing import Optional

from django.conf import settings


def _key() -> bytes:
    return str(getattr(settings, "AUDIT_HASH_SALT", None) or settings.SECRET_KEY).encode("utf-8")


def keyed_digest(value: Optional[str]) -> Optional[str]:
    # 원문은 남기지 않는다. 같은 키면 같은 값끼리만 비교 가능
    if not value:
        return None
    return hmac.new(_key(), value.encode("utf-8"), hashlib.sha256).hexdigest()


def client_address(meta) -> Optional[str]:
    forwarded = (meta.get("HTTP_X_FORWARDED_FOR") or "").split(",")[0].strip()
    return forwarded or meta.get("HTTP_X_REAL_IP") or meta.get("REMOTE_ADDR") or None


@dataclass(frozen=True)
class ClientFingerprint:
    ip_hash: Optional[str] = None
    ua_hash: Optional[str] = None

    @classmethod
    def from_request(cls, request) -> "ClientFingerprint":
        if request is None:
            return cls()
        meta = request.META
        return cls(ip_hash=keyed_digest(client_address(meta)), ua_hash=keyed_digest(meta.get("HTTP_USER_AGENT")))
