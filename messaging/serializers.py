from rest_framework import serializers

from .models import MAX_MESSAGE_LENGTH, Message


class ParticipantOut(serializers.Serializer):
    # 대화 상대에게 연락처는 노출하지 않는다
    id = serializers.UUIDField()
    username = serializers.CharField()
    avatar = serializers.CharField()


class MessagePostOut(serializers.Serializer):
    id = serializers.UUIDField()
    title = serializers.CharField()
    type = serializers.CharField()


class MessageOut(serializers.ModelSerializer):
    sender = ParticipantOut(read_only=True)
    receiver = ParticipantOut(read_only=True)
    post = MessagePostOut(read_only=True, allow_null=True)

    class Meta:
        model = Message
        fields = ("id", "sender", "receiver", "post", "content", "is_read", "created_at")
        read_only_fields = fields


class MessageIn(serializers.Serializer):
    receiver_id = serializers.UUIDField()
    content = serializers.CharField(max_length=MAX_MESSAGE_LENGTH)
    post_id = serializers.UUIDField(required=False, allow_null=True)


class ConversationOut(serializers.Serializer):
    partner = ParticipantOut()
    last_message = MessageOut()
    unread_count = serializers.IntegerField()
