from rest_framework import serializers

from .models import MAX_COMMENT_LENGTH, Comment


class CommentAuthorOut(serializers.Serializer):
    # 댓글 작성자는 연락처 없이 최소 정보만 노출
    id = serializers.UUIDField()
    username = serializers.CharField()
    avatar = serializers.CharField()


class CommentOut(serializers.ModelSerializer):
    post_id = serializers.UUIDField(read_only=True)
    parent_id = serializers.UUIDField(read_only=True, allow_null=True)
    author = CommentAuthorOut(read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "post_id", "parent_id", "author", "content", "created_at"]
        read_only_fields = fields


class CommentTreeOut(CommentOut):
    replies = CommentOut(many=True, read_only=True, source="reply_list")

    class Meta(CommentOut.Meta):
        fields = CommentOut.Meta.fields + ["replies"]
        read_only_fields = fields


class CommentCreateIn(serializers.Serializer):
    content = serializers.CharField(
        max_length=MAX_COMMENT_LENGTH,
        trim_whitespace=True,
        error_messages={
            "blank": "Content must not be empty.",
            "required": "Content must not be empty.",
        },
    )
    parent = serializers.UUIDField(required=False, allow_null=True)
