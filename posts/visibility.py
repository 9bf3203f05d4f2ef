"""
미인증 열람자에게 게시글을 보여줄 때 적용하는 검열 규칙.

- 뷰는 ORM 객체 대신 PostView.from_model() 로 만든 불변 값만 다룬다.
- censor() 결과는 Full(원본 그대로) 또는 Censored(가린 사본 + 원본 참조) 중 하나.
- Censored.original 은 서버 내부 참조용이며 직렬화 대상이 아니다.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional, Tuple, Union

LOCATION_HIDDEN = "Location hidden"
EMAIL_MASK = "[Email Hidden]"
PHONE_MASK = "[Contact Hidden]"
AUTHOR_EMAIL_MASK = "[Verify to see email]"
AUTHOR_PHONE_MASK = "[Verify to see phone]"

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(\+?\d{1,4}[-.\s]?)?\(?\d{2,5}\)?[-.\s]?\d{2,5}[-.\s]?\d{2,9}", re.ASCII)


@dataclass(frozen=True)
class AuthorView:
    id: str
    username: str
    email: str = ""
    phone: str = ""
    avatar: str = ""
    verification_status: str = ""

    @classmethod
    def from_model(cls, user) -> "AuthorView":
        return cls(
            id=str(user.pk),
            username=user.username,
            email=user.email or "",
            phone=user.phone or "",
            avatar=user.avatar or "",
            verification_status=user.verification_status,
        )


@dataclass(frozen=True)
class LocationView:
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass(frozen=True)
class PostView:
    id: str
    title: str
    description: str
    type: str
    category: str
    location: LocationView
    author: AuthorView
    status: str
    date_lost: Optional[datetime] = None
    date_found: Optional[datetime] = None
    images: Tuple[str, ...] = field(default_factory=tuple)
    tags: Tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_censored: bool = False

    @classmethod
    def from_model(cls, post) -> "PostView":
        return cls(
            id=str(post.pk),
            title=post.title,
            description=post.description,
            type=post.type,
            category=post.category,
            location=LocationView(address=post.location_address, latitude=post.latitude, longitude=post.longitude),
            author=AuthorView.from_model(post.author),
            status=post.status,
            date_lost=post.date_lost,
            date_found=post.date_found,
            images=tuple(post.images or ()),
            tags=tuple(post.tags or ()),
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


@dataclass(frozen=True)
class Full:
    item: PostView


@dataclass(frozen=True)
class Censored:
    item: PostView
    original: PostView = field(repr=False, compare=False)


Visible = Union[Full, Censored]


def coarsen_address(address: Optional[str]) -> str:
    parts = [p.strip() for p in (address or "").split(",") if p.strip()]
    if len(parts) >= 2:
        return ", ".join(parts[:2]) + "..."
    if len(parts) == 1:
        words = parts[0].split()
        if len(words) >= 3:
            return " ".join(words[:3]) + "..."
        return parts[0]
    return LOCATION_HIDDEN


def redact_contacts(text: Optional[str]) -> str:
    # 이메일을 먼저 가려야 주소 안의 숫자열이 전화번호로 잘리지 않는다
    text = EMAIL_RE.sub(EMAIL_MASK, text or "")
    return PHONE_RE.sub(PHONE_MASK, text)


def _mask_author(author: AuthorView) -> AuthorView:
    return replace(
        author,
        email=AUTHOR_EMAIL_MASK if author.email else "",
        phone=AUTHOR_PHONE_MASK if author.phone else "",
    )


def censor(item: Union[PostView, Visible], viewer_verified: bool) -> Visible:
    """
    순수 함수. 같은 입력이면 항상 같은 결과이고, 이미 검열된 값은 그대로 돌려준다.
    """
    if isinstance(item, Censored):
        return item
    if isinstance(item, Full):
        item = item.item
    if item.is_censored:
        # 이미 가린 값을 다시 가리면 주소 말줄임이 중복된다
        return Censored(item=item, original=item)
    if viewer_verified:
        return Full(item)

    redacted = replace(
        item,
        description=redact_contacts(item.description),
        location=LocationView(address=coarsen_address(item.location.address)),
        author=_mask_author(item.author),
        is_censored=True,
    )
    return Censored(item=redacted, original=item)


def viewer_is_verified(user) -> bool:
    # 익명/정지/미인증은 모두 미인증 열람자. 요청마다 저장소의 현재 상태를 다시 읽는다.
    if user is None or not getattr(user, "is_authenticated", False):
        return False

    from users.models import User, VerificationStatus

    return User.objects.filter(pk=user.pk, verification_status=VerificationStatus.VERIFIED, is_banned=False).exists()
