# coding: utf-8
import contextvars
import logging

from blogs_sanic import settings

logger = logging.getLogger('blogs_sanic')

# current request context: trace_id, request_at and the route context
context_var = contextvars.ContextVar('context_var', default=None)


class Registry:
    """ grouped key-value store of the package: the app, route metadata ...
    """
    DEFAULT_GROUP = '__default'

    def __init__(self):
        self._groups = {}

    def set(self, key, value, group=None):
        self._groups.setdefault(group or self.DEFAULT_GROUP, {})[key] = value

    def get(self, key, group=None):
        return self.get_group(group).get(key)

    def get_group(self, group=None):
        return self._groups.get(group or self.DEFAULT_GROUP, {})


registry = Registry()

from blogs_sanic.app import BlogsSanic
from blogs_sanic.blueprints import BlogsBlueprint
from blogs_sanic.serializers import *
