import logging

from django.db import transaction
from django.utils import timezone

from common.exceptions import Forbidden, InvalidState, MissingDocuments, MissingReason, NotFound
from notifications.models import Notification
from notifications.services import notify
from users.models import User, VerificationStatus

log = logging.getLogger(__name__)

SUBMITTABLE = (VerificationStatus.UNVERIFIED, VerificationStatus.REJECTED)


def _clean(value) -> str:
    return (value or "").strip()


class VerificationService:
    """
    신원 인증 상태 전이를 한 곳에서 강제한다.
    - unverified -> pending -> {verified, rejected}
    - rejected -> pending (재제출)
    - verified 는 종단 상태(취소 경로 없음)
    관리자 전이는 기대 이전 상태를 조건으로 한 UPDATE(compare-and-set)로 기록해
    동시 요청 중 하나만 성공하고 나머지는 InvalidState 가 된다.
    """

    @staticmethod
    def initial_status(front, back, selfie) -> str:
        # 가입 시 문서 3종이 모두 있으면 바로 심사 대기
        if _clean(front) and _clean(back) and _clean(selfie):
            return VerificationStatus.PENDING
        return VerificationStatus.UNVERIFIED

    @staticmethod
    def _ensure_admin(admin):
        if admin is None or not getattr(admin, "is_admin", False):
            raise Forbidden("Access denied. Admin privileges required.")

    @staticmethod
    def _get_user(user_id) -> User:
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise NotFound("User not found.")
        return user

    @staticmethod
    @transaction.atomic
    def submit(actor, *, front, back, selfie) -> User:
        front, back, selfie = _clean(front), _clean(back), _clean(selfie)
        if not (front and back and selfie):
            raise MissingDocuments()

        user = VerificationService._get_user(actor.pk)
        if user.verification_status == VerificationStatus.VERIFIED:
            raise InvalidState("Your account is already verified.")
        if user.verification_status == VerificationStatus.PENDING:
            raise InvalidState("Your verification is already pending review.")

        updated = User.objects.filter(pk=user.pk, verification_status__in=SUBMITTABLE).update(
            verification_status=VerificationStatus.PENDING,
            nid_front_image=front,
            nid_back_image=back,
            selfie_image=selfie,
            rejection_reason="",
            updated_at=timezone.now(),
        )
        if not updated:
            raise InvalidState("Verification state changed concurrently; please retry.")

        user.refresh_from_db()
        log.info("verification submitted: user=%s", user.pk)
        return user

    @staticmethod
    @transaction.atomic
    def approve(admin, user_id, note: str = "") -> User:
        VerificationService._ensure_admin(admin)
        user = VerificationService._get_user(user_id)
        if user.verification_status != VerificationStatus.PENDING:
            raise InvalidState("User is not pending verification.")

        now = timezone.now()
        note = _clean(note)
        updated = User.objects.filter(pk=user.pk, verification_status=VerificationStatus.PENDING).update(
            verification_status=VerificationStatus.VERIFIED,
            verified_at=now,
            verified_by=admin,
            verification_note=note,
            rejection_reason="",
            updated_at=now,
        )
        if not updated:
            raise InvalidState("User is not pending verification.")

        user.refresh_from_db()
        log.info("verification approved: user=%s admin=%s", user.pk, admin.pk)

        notify(
            user_id=user.pk,
            type_=Notification.Type.VERIFICATION_APPROVED,
            title="Verification Approved!",
            message=(
                f"Your account has been verified. Note: {note}"
                if note
                else "Congratulations! Your account has been verified. You now have full access to all features."
            ),
            link="/dashboard",
        )
        return user

    @staticmethod
    @transaction.atomic
    def reject(admin, user_id, reason) -> User:
        VerificationService._ensure_admin(admin)
        reason = _clean(reason)
        if not reason:
            raise MissingReason("Rejection reason is required.")

        user = VerificationService._get_user(user_id)
        if user.verification_status != VerificationStatus.PENDING:
            raise InvalidState("User is not pending verification.")

        updated = User.objects.filter(pk=user.pk, verification_status=VerificationStatus.PENDING).update(
            verification_status=VerificationStatus.REJECTED,
            rejection_reason=reason,
            verified_by=admin,
            updated_at=timezone.now(),
        )
        if not updated:
            raise InvalidState("User is not pending verification.")

        user.refresh_from_db()
        log.info("verification rejected: user=%s admin=%s", user.pk, admin.pk)

        notify(
            user_id=user.pk,
            type_=Notification.Type.VERIFICATION_REJECTED,
            title="Verification Rejected",
            message=f"Your verification request was rejected. Reason: {reason}. Please resubmit with valid documents.",
            link="/profile",
        )
        return user
