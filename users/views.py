from django.db import transaction
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import RefreshToken

from audits.models import AuditAction
from audits.services import write_audit_log
from common.exceptions import NotFound
from common.schema import AuthOut, ErrorOut, MessageOut, SuspendedErrorOut, UserStatsOut
from posts.services import user_post_stats

from .models import User
from .permissions import IsActiveMember
from .serializers import (
    ChangePasswordIn,
    LoginIn,
    LogoutIn,
    MeOut,
    ProfileUpdateIn,
    PublicProfileOut,
    RegisterIn,
    VerificationStatusOut,
    VerificationSubmitIn,
    issue_tokens,
)
from .services.gating import ensure_not_banned
from .services.verification import VerificationService


def _audit(request, action, user, **extra):
    write_audit_log(action=action, user=user, target_type="user", target_id=str(user.pk), request=request, extra=extra)


class AuthViewSet(viewsets.GenericViewSet):
    queryset = User.objects.all()
    permission_classes = [AllowAny]
    serializer_class = MeOut

    @extend_schema(
        tags=["Auth"],
        summary="회원가입",
        description="신원 문서 3종(NID 앞/뒤, 셀카)을 모두 보내면 `pending`, 아니면 `unverified` 로 시작합니다.",
        operation_id="auth_register",
        request=RegisterIn,
        responses={201: OpenApiResponse(response=AuthOut), 400: OpenApiResponse(response=ErrorOut)},
        examples=[OpenApiExample("요청 예시", value={"username": "rahim", "email": "rahim@example.com", "password": "secret12"}, request_only=True)],
    )
    @action(detail=False, methods=["post"])
    @transaction.atomic
    def register(self, request):
        s = RegisterIn(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data

        user = User.objects.create_user(
            email=v["email"],
            username=v["username"],
            password=v["password"],
            phone=v.get("phone", ""),
            nid_front_image=v.get("nid_front_image", "").strip(),
            nid_back_image=v.get("nid_back_image", "").strip(),
            selfie_image=v.get("selfie_image", "").strip(),
            verification_status=VerificationService.initial_status(v.get("nid_front_image"), v.get("nid_back_image"), v.get("selfie_image")),
        )
        _audit(request, AuditAction.REGISTER, user, verification_status=user.verification_status)

        message = (
            "Account created successfully. Your verification is pending review."
            if user.verification_status == "pending"
            else "Account created successfully. Please submit verification documents to access full features."
        )
        data = {"message": message, "user": MeOut(user).data, **issue_tokens(user)}
        return Response(data, status=status.HTTP_201_CREATED)

    @extend_schema(
        tags=["Auth"],
        summary="로그인(email/password)",
        operation_id="auth_login",
        request=LoginIn,
        responses={200: OpenApiResponse(response=AuthOut), 401: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=SuspendedErrorOut)},
    )
    @action(detail=False, methods=["post"])
    def login(self, request):
        s = LoginIn(data=request.data, context={"request": request})
        s.is_valid(raise_exception=True)
        user = s.validated_data["user"]

        # 자격 증명이 맞아도 정지 계정은 토큰을 받지 못한다
        ensure_not_banned(user)

        _audit(request, AuditAction.LOGIN, user)
        return Response({"message": "Login successful", "user": MeOut(user).data, **issue_tokens(user)}, status=status.HTTP_200_OK)

    @extend_schema(tags=["Auth"], summary="액세스 토큰 갱신", operation_id="auth_refresh", request=TokenRefreshSerializer, responses={200: TokenRefreshSerializer, 401: ErrorOut, 403: SuspendedErrorOut})
    @action(detail=False, methods=["post"])
    def refresh(self, request):
        s = TokenRefreshSerializer(data=request.data)
        try:
            s.is_valid(raise_exception=True)
            user_id = RefreshToken(request.data["refresh"]).get(jwt_settings.USER_ID_CLAIM)
        except TokenError as e:
            return Response({"detail": str(e)}, status=status.HTTP_401_UNAUTHORIZED)

        # 정지 계정은 기존 refresh 토큰으로도 새 access 를 받지 못한다
        ensure_not_banned(User.objects.filter(pk=user_id).first())
        return Response(s.validated_data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Auth"], summary="로그아웃(refresh 블랙리스트)", operation_id="auth_logout", request=LogoutIn, responses={204: OpenApiResponse(description="로그아웃")})
    @action(detail=False, methods=["post"])
    def logout(self, request):
        s = LogoutIn(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            RefreshToken(s.validated_data["refresh"]).blacklist()
        except TokenError:
            # 이미 만료/블랙리스트된 토큰이면 결과는 같다
            pass
        if request.user and request.user.is_authenticated:
            _audit(request, AuditAction.LOGOUT, request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Auth"], summary="내 정보", operation_id="auth_me", responses={200: MeOut, 401: ErrorOut, 403: SuspendedErrorOut})
    @action(detail=False, methods=["get"], permission_classes=[IsActiveMember])
    def me(self, request):
        return Response(MeOut(request.user).data)


class UserViewSet(viewsets.GenericViewSet):
    """
    /api/v1/users/...
    - 공개 프로필/통계는 익명 허용
    - 인증 제출/상태, 프로필 수정, 비밀번호 변경은 본인
    """

    queryset = User.objects.all()
    permission_classes = [IsActiveMember]
    serializer_class = PublicProfileOut
    lookup_value_regex = "[0-9a-f-]{36}"

    def _get_user(self, pk):
        user = User.objects.filter(pk=pk).first()
        if user is None:
            raise NotFound("User not found.")
        return user

    @extend_schema(
        tags=["Users"],
        summary="공개 프로필",
        operation_id="users_retrieve",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="사용자 ID")],
        responses={200: PublicProfileOut, 404: ErrorOut},
    )
    def retrieve(self, request, pk=None):
        return Response(PublicProfileOut(self._get_user(pk)).data)

    @extend_schema(
        tags=["Users"],
        summary="사용자 게시글 통계",
        operation_id="users_stats",
        parameters=[OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="사용자 ID")],
        responses={200: UserStatsOut, 404: ErrorOut},
    )
    @action(detail=True, methods=["get"], permission_classes=[AllowAny])
    def stats(self, request, pk=None):
        user = self._get_user(pk)
        return Response(user_post_stats(user.pk))

    @extend_schema(
        tags=["Users/Verification"],
        summary="신원 인증 문서 제출",
        description="`unverified`/`rejected` 에서만 가능. 세 문서 중 하나라도 비면 `missing_documents`.",
        operation_id="users_verification_submit",
        request=VerificationSubmitIn,
        responses={200: VerificationStatusOut, 400: ErrorOut, 401: ErrorOut, 403: SuspendedErrorOut},
    )
    @action(detail=False, methods=["post"], url_path="verification/submit")
    def verification_submit(self, request):
        s = VerificationSubmitIn(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        user = VerificationService.submit(request.user, front=v["nid_front_image"], back=v["nid_back_image"], selfie=v["selfie_image"])
        _audit(request, AuditAction.VERIFICATION_SUBMIT, user)
        return Response(VerificationStatusOut(user).data)

    @extend_schema(tags=["Users/Verification"], summary="내 인증 상태", operation_id="users_verification_status", responses={200: VerificationStatusOut, 401: ErrorOut})
    @action(detail=False, methods=["get"], url_path="verification/status")
    def verification_status(self, request):
        user = self._get_user(request.user.pk)
        return Response(VerificationStatusOut(user).data)

    @extend_schema(tags=["Users"], summary="내 프로필 수정(부분)", operation_id="users_profile_update", request=ProfileUpdateIn, responses={200: MeOut, 400: ErrorOut, 401: ErrorOut})
    @action(detail=False, methods=["patch"], url_path="profile")
    def profile(self, request):
        s = ProfileUpdateIn(request.user, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        user = s.save()
        return Response(MeOut(user).data)

    @extend_schema(tags=["Users"], summary="비밀번호 변경", operation_id="users_change_password", request=ChangePasswordIn, responses={200: MessageOut, 400: ErrorOut, 401: ErrorOut})
    @action(detail=False, methods=["post"], url_path="change-password")
    def change_password(self, request):
        s = ChangePasswordIn(data=request.data, context={"request": request})
        s.is_valid(raise_exception=True)
        user = request.user
        if not user.check_password(s.validated_data["current_password"]):
            return Response({"detail": "Current password is incorrect"}, status=status.HTTP_400_BAD_REQUEST)
        user.set_password(s.validated_data["new_password"])
        user.save(update_fields=["password", "updated_at"])
        return Response({"message": "Password changed successfully"})
