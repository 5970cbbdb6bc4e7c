# -*- coding: utf-8 -*-
from sanic import Blueprint

from blogs_sanic.app import SchemaRouteMixin

__all__ = ['BlogsBlueprint']


class BlogsBlueprint(SchemaRouteMixin, Blueprint):
    """
    Blueprint with the shorthand route decorators of `SchemaRouteMixin`.
    route metadata is recorded with `url_prefix` applied.
    """

    def full_uri(self, uri):
        prefix = self.url_prefix or ''
        if uri.startswith('/') and prefix.endswith('/'):
            return prefix + uri[1:]
        return prefix + uri
