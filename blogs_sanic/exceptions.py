# -*- coding: utf-8 -*-
from sanic.exceptions import BadRequest

__all__ = ['ValidationError', 'ConfigError']


class ValidationError(BadRequest):
    """
    request data (path, query, header or body) does not satisfy
    the serializer declared on the route. Always answered with 400.
    """


class ConfigError(Exception):
    """
    environment does not satisfy `settings.env_schema()`, the server must not start.
    """
