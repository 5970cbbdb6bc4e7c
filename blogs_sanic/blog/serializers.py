from blogs_sanic import serializers


class BlogBodySerializer(serializers.Serializer):
    title = serializers.StringField('Blog title', required=True, min_length=1, strict=True)

    class Meta:
        additional_properties = False


class BlogSerializer(serializers.Serializer):
    id = serializers.IntField('Blog id', required=True)
    title = serializers.StringField('Blog title', required=True)


class MessageSerializer(serializers.Serializer):
    msg = serializers.StringField('Message', required=True)


blog_id_params = {
    'blog_id': serializers.IntField('Blog id', required=True, min_value=1)
}
