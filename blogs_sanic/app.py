# -*- coding: utf-8 -*-
from functools import wraps

from sanic import Sanic

from blogs_sanic import serializers, views, registry, context_var
from blogs_sanic.metadata import HandlerMetaData

__all__ = ['SchemaRouteMixin', 'BlogsSanic']


class SchemaRouteMixin:
    """
    route decorators which accept serializers for header, path, query, body and response.
    shared by the app and blueprints.

        @app.get('/<blog_id>', path_params={'blog_id': IntField('blog id', required=True)},
                 response_serializer=BlogSerializer())
        async def blog_detail(request, blog_id, **kwargs):
            ...

    the handler is called with the validated values as keyword arguments: fields of
    header, query and path by name, plus `header`, `query`, `path` and `body`.
    its return value goes through `response_serializer` unless it is already a response.
    """

    def full_uri(self, uri):
        return uri

    def schema_route(self,
                     uri: str,
                     method: str = 'GET',
                     host=None,
                     strict_slashes=None,
                     version=None,
                     name=None,
                     success_code=200,
                     header_params: serializers.BaseSerializer = None,
                     path_params: serializers.BaseSerializer = None,
                     query_params: serializers.BaseSerializer = None,
                     body_serializer: serializers.BaseSerializer = None,
                     response_serializer: serializers.BaseSerializer = None,
                     tags: list = None,
                     context: dict = None,
                     swagger_exclude: bool = False):
        """
        :param uri: sanic uri, path params in it must be the fields of `path_params`
        :param method: Default GET.
        :param host, strict_slashes, version, name: passed to sanic's `add_route`
        :param success_code: status of a successful response
        :param header_params, path_params, query_params, body_serializer, response_serializer:
               serializers, or declarations such as `{'blog_id': IntField()}`
        :param tags: swagger tags
        :param context: merged into the request context, eg. 'response_shape'
        :param swagger_exclude: hide the route from the swagger document
        :return: decorator
        """
        method = method.upper()

        metadata = HandlerMetaData(uri=self.full_uri(uri),
                                   method=method,
                                   tags=tags,
                                   success_code=success_code,
                                   header_params=header_params,
                                   path_params=path_params,
                                   query_params=query_params,
                                   body_serializer=body_serializer,
                                   response_serializer=response_serializer,
                                   context=context,
                                   swagger_exclude=swagger_exclude)

        def decorator(raw_handler):
            @wraps(raw_handler)
            async def handler(request, *args, **kwargs):
                ctx = context_var.get()
                if ctx is None:
                    ctx = {}
                    context_var.set(ctx)
                ctx.update(metadata.context or {})
                params = await views.extract_params(request, metadata, kwargs)
                result = await raw_handler(request, **params)
                return await views.process_result(result, metadata)

            handler.metadata = metadata
            metadata.handler = handler

            self.add_route(handler=handler, uri=uri, methods=frozenset({method}), host=host,
                           strict_slashes=strict_slashes, version=version, name=name)
            registry.set((method, metadata.uri), metadata, 'routes')
            return handler

        return decorator

    # Shorthand method decorators, options as `schema_route`
    def get(self, uri, **options):
        return self.schema_route(uri, method='GET', **options)

    def post(self, uri, success_code=201, **options):
        return self.schema_route(uri, method='POST', success_code=success_code, **options)

    def put(self, uri, **options):
        return self.schema_route(uri, method='PUT', **options)

    def delete(self, uri, **options):
        return self.schema_route(uri, method='DELETE', **options)


class BlogsSanic(SchemaRouteMixin, Sanic):
    pass
