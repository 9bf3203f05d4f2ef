from rest_framework_simplejwt.authentication import JWTAuthentication

from users.services.gating import ensure_not_banned


class ActiveUserJWTAuthentication(JWTAuthentication):
    # 토큰이 유효해도 정지된 계정이면 매 요청마다 차단
    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        ensure_not_banned(user)
        return user
