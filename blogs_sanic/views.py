# -*- coding: utf-8 -*-
import inspect
from http import HTTPStatus

from sanic import exceptions
from sanic.response import json, BaseHTTPResponse

from blogs_sanic import utils, serializers, settings, context_var
from blogs_sanic.exceptions import ValidationError


class ResponseShape:
    """
    how results and errors are wrapped into response bodies, and how that wrapping
    is documented. set your subclass by setting RESPONSE_SHAPE or route context 'response_shape'.
    """

    @staticmethod
    def create_body(result, status_code):
        """
        :return: (body, status_code), the result is returned as is
        """
        return result, status_code

    @staticmethod
    def create_error_body(message, status_code):
        """
        :return: (body, status_code), body is `{statusCode, error, message}`
        """
        return {
            'statusCode': status_code,
            'error': reason_phrase(status_code),
            'message': message
        }, status_code

    @staticmethod
    def swagger(result_schema):
        """ swagger schema of a success body, given the schema of the result """
        return result_schema

    @staticmethod
    def swagger_error():
        return {
            "title": "ErrorObject",
            "type": "object",
            "properties": {
                "statusCode": {"type": "integer", "example": 400},
                "error": {"type": "string", "example": "Bad Request"},
                "message": {"type": "string", "example": "body should have required property 'title'"}
            },
            "required": ["statusCode", "error", "message"],
        }


def reason_phrase(status_code):
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return 'Error'


def get_response_shape(context=None):
    """ 'response_shape' of the route context, otherwise setting RESPONSE_SHAPE """
    shape = utils.get_value(context, 'response_shape') or settings.get('RESPONSE_SHAPE')
    if isinstance(shape, str):
        shape = utils.import_from_str(shape)
    if inspect.isclass(shape) and issubclass(shape, ResponseShape):
        return shape
    return ResponseShape


def exception_handler(request, exception):
    """
    any exception -> error response. the message of a 5xx is the reason phrase unless DEBUG
    """
    status = getattr(exception, 'status_code', None) or 500
    if status >= 500 and not settings.get('DEBUG'):
        message = reason_phrase(status)
    else:
        message = getattr(exception, 'message', None) or str(exception) or reason_phrase(status)
    body, status = get_response_shape(context_var.get()).create_error_body(message, status)
    return json(body, status=status)


def current_context(location):
    return dict(context_var.get() or {}, location=location)


def _query_data(request, serializer):
    # undeclared args are dropped, ListField keeps every value of the arg
    data = {}
    for name, field in serializer.fields.items():
        if name not in request.args:
            continue
        if isinstance(field, serializers.ListField):
            data[name] = request.args.getlist(name)
        else:
            data[name] = request.args.get(name)
    return data


def _body_data(request):
    try:
        return request.json
    except exceptions.BadRequest:
        raise ValidationError('body should be valid json')


async def extract_params(request, metadata, path_args=None):
    """
    validate header, query, path and body of the request against the route's metadata.
    the validated values are returned by location (`header`, `query`, `path`, `body`),
    fields of header, query and path are also flattened into the result.
    :raise ValidationError: the handler should not run
    """
    params = {'header': None, 'query': None, 'path': None, 'body': None}
    sources = (
        ('header', metadata.header_serializer, 'headers', lambda s: request.headers),
        ('query', metadata.query_serializer, 'querystring', lambda s: _query_data(request, s)),
        ('path', metadata.path_serializer, 'params', lambda s: path_args or {}),
    )
    for key, serializer, location, data_of in sources:
        if serializer:
            params[key] = serializer.validate(data_of(serializer), current_context(location))
            params.update(params[key] or {})

    if metadata.body_serializer:
        params['body'] = metadata.body_serializer.validate(_body_data(request), current_context('body'))

    return params


async def process_result(result, metadata):
    """
    the handler's return value -> json response with `metadata.success_code`.
    sanic responses are returned untouched, results of routes without `response_serializer` should be json friendly.
    """
    if isinstance(result, BaseHTTPResponse):
        return result

    ctx = context_var.get()
    data = result
    if metadata.response_serializer:
        data = metadata.response_serializer.to_primitive(result, ctx)

    body, status = get_response_shape(ctx).create_body(data, metadata.success_code)
    return json(body, status=status)
