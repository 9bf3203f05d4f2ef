from dataclasses import dataclass

from django.db import models

from common.exceptions import AccountSuspended, VerificationRequired
from users.models import User, VerificationStatus


class GatedAction(models.TextChoices):
    CREATE_POST = "create_post", "create posts"
    CREATE_COMMENT = "create_comment", "comment"


# 상태별 안내 문구. {action} 자리에 GatedAction.label 이 들어간다.
VERIFICATION_MESSAGES = {
    VerificationStatus.PENDING: "Your verification is pending. Please wait for approval to {action}.",
    VerificationStatus.REJECTED: "Your verification was rejected. Please resubmit your documents to {action}.",
    VerificationStatus.UNVERIFIED: "You need to be a verified user to {action}. Please submit your verification documents.",
}


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    verification_status: str
    message: str = ""
    requires_verification: bool = False


def ensure_not_banned(user) -> None:
    # 인증 여부와 무관하게 정지 계정은 모든 인증 요청에서 차단
    if user is not None and getattr(user, "is_banned", False):
        raise AccountSuspended(ban_reason=user.ban_reason or "")


def verification_message(status: str, action: str) -> str:
    template = VERIFICATION_MESSAGES.get(status, VERIFICATION_MESSAGES[VerificationStatus.UNVERIFIED])
    return template.format(action=GatedAction(action).label)


def gate_write(actor_id, action: str) -> GateDecision:
    """
    검증이 필요한 쓰기(게시글/댓글/대댓글 작성) 직전에 매번 현재 상태를 다시 읽어 판정한다.
    - 정지 계정이면 AccountSuspended 를 던진다(인증 게이트보다 우선).
    - 사용자를 찾지 못하면 unverified 로 간주(fail closed).
    """
    user = User.objects.filter(pk=actor_id).only("id", "verification_status", "is_banned", "ban_reason").first() if actor_id else None
    ensure_not_banned(user)

    status = user.verification_status if user is not None else VerificationStatus.UNVERIFIED
    if status == VerificationStatus.VERIFIED:
        return GateDecision(allowed=True, verification_status=status)

    return GateDecision(
        allowed=False,
        verification_status=status,
        message=verification_message(status, action),
        requires_verification=True,
    )


def require_verified(actor_id, action: str) -> GateDecision:
    decision = gate_write(actor_id, action)
    if not decision.allowed:
        raise VerificationRequired(
            decision.message,
            requires_verification=True,
            verification_status=decision.verification_status,
        )
    return decision
