# -*- coding: utf-8 -*-
from . import serializers, utils


def as_serializer(declaration):
    """ a serializer, or a declaration understood by `serializers.serializer_from` """
    if declaration is None or isinstance(declaration, serializers.BaseSerializer):
        return declaration
    return serializers.serializer_from(declaration)


class HandlerMetaData:
    """
    everything declared on a route: where it lives, how params are validated
    and how the result is serialized. kept on the handler as `handler.metadata`
    """

    def __init__(self, uri, method, tags=None,
                 header_params=None, path_params=None, query_params=None,
                 body_serializer=None, response_serializer=None,
                 success_code=200, context=None, swagger_exclude=False):
        self.uri = uri
        self.method = method
        self.tags = sorted(set(tags or []))
        self.success_code = success_code
        self.context = context
        self.swagger_exclude = swagger_exclude
        self.handler = None

        self.header_serializer = as_serializer(header_params)
        self.path_serializer = as_serializer(path_params)
        self.query_serializer = as_serializer(query_params)
        self.body_serializer = as_serializer(body_serializer)
        self.response_serializer = as_serializer(response_serializer)

        in_uri = set(utils.path_param_names(uri))
        declared = set(self.path_serializer.fields) if self.path_serializer else set()
        if in_uri != declared:
            raise ValueError('path params of %s are %s, but path_params declares %s' %
                             (uri, sorted(in_uri), sorted(declared)))

    def __repr__(self):
        return '<HandlerMetaData %s %s>' % (self.method, self.uri)
