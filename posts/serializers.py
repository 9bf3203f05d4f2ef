from rest_framework import serializers

from .models import Category, PostStatus, PostType


class PostWriteIn(serializers.Serializer):
    title = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=1000)
    type = serializers.ChoiceField(choices=PostType.choices)
    category = serializers.ChoiceField(choices=Category.choices)
    date_lost = serializers.DateTimeField(required=False, allow_null=True)
    date_found = serializers.DateTimeField(required=False, allow_null=True)
    location_address = serializers.CharField(max_length=255)
    latitude = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    longitude = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    images = serializers.ListField(child=serializers.CharField(max_length=512), required=False, allow_empty=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False, allow_empty=True)

    def validate(self, data):
        # 부분 수정(PATCH)에서는 유형/날짜 정합성을 서비스의 clean() 이 최종 판단
        if self.partial:
            return data
        if data["type"] == PostType.LOST and not data.get("date_lost"):
            raise serializers.ValidationError({"date_lost": "Date lost is required for lost items"})
        if data["type"] == PostType.FOUND and not data.get("date_found"):
            raise serializers.ValidationError({"date_found": "Date found is required for found items"})
        return data


class PostUpdateIn(PostWriteIn):
    status = serializers.ChoiceField(choices=PostStatus.choices, required=False)


class AuthorOut(serializers.Serializer):
    id = serializers.CharField()
    username = serializers.CharField()
    email = serializers.CharField()
    phone = serializers.CharField()
    avatar = serializers.CharField()
    verification_status = serializers.CharField()


class LocationOut(serializers.Serializer):
    address = serializers.CharField()
    latitude = serializers.FloatField(allow_null=True)
    longitude = serializers.FloatField(allow_null=True)


class PostOut(serializers.Serializer):
    """
    PostView(불변 값) 직렬화. 검열된 경우에도 같은 모양이며 is_censored 로만 구분된다.
    """

    id = serializers.CharField()
    title = serializers.CharField()
    description = serializers.CharField()
    type = serializers.CharField()
    category = serializers.CharField()
    date_lost = serializers.DateTimeField(allow_null=True)
    date_found = serializers.DateTimeField(allow_null=True)
    location = LocationOut()
    images = serializers.ListField(child=serializers.CharField())
    tags = serializers.ListField(child=serializers.CharField())
    status = serializers.CharField()
    author = AuthorOut()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()
    is_censored = serializers.BooleanField()
