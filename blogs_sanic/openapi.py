import copy
import inspect

from sanic.blueprints import Blueprint
from sanic.response import json

from blogs_sanic import settings, utils, serializers, registry
from blogs_sanic.views import get_response_shape, reason_phrase

blueprint = Blueprint('swagger', url_prefix='/swagger')


def _summary_description(handler):
    """ first line of the docstring is the summary, the rest is the description """
    lines = inspect.cleandoc(getattr(handler, '__doc__', None) or '').split('\n', 1)
    return lines[0].strip(), (lines[1] if len(lines) > 1 else '').strip()


def _collect_definitions(spec, item):
    """ definitions of the named serializers reachable from a serializer or a field """
    if isinstance(item, serializers.ListSerializer):
        _collect_definitions(spec, item.child)
    elif isinstance(item, serializers.BaseSerializer):
        cls_str = utils.cls_str_of_obj(item)
        if cls_str in serializers.definitions:
            spec['definitions'][cls_str] = serializers.definitions[cls_str]
        for field in item.fields.values():
            _collect_definitions(spec, field)
    elif isinstance(item, serializers.SerializerField):
        _collect_definitions(spec, item.serializer)
    elif isinstance(item, serializers.ListField):
        _collect_definitions(spec, item.field)


def _parameters(spec, serializer, location):
    if not serializer:
        return []
    _collect_definitions(spec, serializer)
    parameters = []
    for field in serializer.fields.values():
        parameter = dict(field.openapi_spec(), **{'in': location})
        if location == 'path':
            parameter['required'] = True
        parameters.append(parameter)
    return parameters


def _error_response(shape, status_code):
    return {'description': reason_phrase(status_code), 'schema': shape.swagger_error()}


def _operation(spec, metadata):
    parameters = (_parameters(spec, metadata.header_serializer, 'header') +
                  _parameters(spec, metadata.path_serializer, 'path') +
                  _parameters(spec, metadata.query_serializer, 'query'))
    if metadata.body_serializer:
        _collect_definitions(spec, metadata.body_serializer)
        parameters.append({
            'in': 'body',
            'name': 'body',
            'required': True,
            'schema': metadata.body_serializer.openapi_spec(),
        })

    result_schema = None
    if metadata.response_serializer:
        _collect_definitions(spec, metadata.response_serializer)
        result_schema = metadata.response_serializer.openapi_spec()

    shape = get_response_shape(metadata.context)
    responses = {
        str(metadata.success_code): {
            'description': reason_phrase(metadata.success_code),
            'schema': shape.swagger(result_schema),
        }
    }
    # validation fails with 400, an unknown resource is 404
    if parameters:
        responses['400'] = _error_response(shape, 400)
    if metadata.path_serializer:
        responses['404'] = _error_response(shape, 404)

    summary, description = _summary_description(metadata.handler)
    return utils.without_nulls({
        'operationId': utils.meth_str(metadata.handler),
        'summary': summary,
        'description': description,
        'consumes': ['application/json'],
        'produces': ['application/json'],
        'tags': metadata.tags,
        'parameters': parameters,
        'responses': responses,
    })


def build_spec(routes=None):
    """
    Swagger 2.0 document of the routes registered through `SchemaRouteMixin`.
    :param routes: {(method, uri): HandlerMetaData}, default every registered route
    """
    spec = copy.deepcopy(settings.get('SWAGGER'))
    spec.update(swagger='2.0', definitions={}, paths={})
    routes = registry.get_group('routes') if routes is None else routes

    for (method, uri), metadata in sorted(routes.items(), key=lambda item: (item[0][1], item[0][0])):
        if metadata.swagger_exclude:
            continue
        path = utils.swagger_path(uri) or '/'
        spec['paths'].setdefault(path, {})[method.lower()] = _operation(spec, metadata)

    return spec


@blueprint.route('/openapi')
async def openapi_spec(request, *args, **kwargs):
    return json(build_spec())
