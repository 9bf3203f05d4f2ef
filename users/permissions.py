from rest_framework.permissions import SAFE_METHODS, BasePermission, IsAuthenticated

from users.services.gating import ensure_not_banned


class IsActiveMember(IsAuthenticated):
    """
    기본 권한: 로그인 + 정지되지 않은 계정.
    force_authenticate 처럼 인증 클래스를 거치지 않는 경로도 여기서 한 번 더 막는다.
    """

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        ensure_not_banned(request.user)
        return True


class IsAdminRole(IsActiveMember):
    message = "Access denied. Admin privileges required."

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return bool(getattr(request.user, "is_admin", False))


class ReadOnlyOrActiveMember(IsActiveMember):
    # 조회는 익명 허용(검열은 뷰에서), 쓰기는 활성 회원만
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            user = getattr(request, "user", None)
            if user is not None and user.is_authenticated:
                ensure_not_banned(user)
            return True
        return super().has_permission(request, view)


class IsAuthorOrReadOnly(BasePermission):
    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return getattr(obj, "author_id", None) == getattr(request.user, "id", None)
