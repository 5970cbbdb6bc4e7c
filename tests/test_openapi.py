# =============================================================================
# tests/test_openapi.py - Route Metadata and Swagger Document Tests
# =============================================================================

import pytest

from blogs_sanic import serializers
from blogs_sanic.metadata import HandlerMetaData
from blogs_sanic.openapi import build_spec


@pytest.fixture
def spec(app):
    return build_spec()


class TestBuildSpec:
    def test_header(self, spec):
        assert spec['swagger'] == '2.0'
        assert 'title' in spec['info']

    def test_blog_paths(self, spec):
        assert set(spec['paths']['/api/blogs']) == {'get', 'post'}
        assert set(spec['paths']['/api/blogs/{blog_id}']) == {'get', 'put', 'delete'}

    def test_excluded_route(self, spec):
        assert '/' not in spec['paths']
        assert '/ping' in spec['paths']

    def test_path_parameter(self, spec):
        parameters = spec['paths']['/api/blogs/{blog_id}']['get']['parameters']

        assert parameters == [{
            'type': 'integer',
            'format': 'int64',
            'required': True,
            'name': 'blog_id',
            'description': 'Blog id',
            'minimum': 1,
            'in': 'path',
        }]

    def test_body_parameter(self, spec):
        operation = spec['paths']['/api/blogs']['post']
        body = operation['parameters'][0]

        assert body['in'] == 'body'
        assert body['schema'] == {'$ref': '#/definitions/blogs_sanic.blog.serializers.BlogBodySerializer'}
        assert set(operation['responses']) == {'201', '400'}

    def test_list_response(self, spec):
        schema = spec['paths']['/api/blogs']['get']['responses']['200']['schema']

        assert schema == {
            'type': 'array',
            'items': {'$ref': '#/definitions/blogs_sanic.blog.serializers.BlogSerializer'},
        }

    def test_not_found_response(self, spec):
        responses = spec['paths']['/api/blogs/{blog_id}']['put']['responses']

        assert set(responses) == {'200', '400', '404'}
        assert responses['404']['schema']['required'] == ['statusCode', 'error', 'message']

    def test_definitions(self, spec):
        definitions = spec['definitions']

        assert definitions['blogs_sanic.blog.serializers.BlogBodySerializer']['additionalProperties'] is False
        assert definitions['blogs_sanic.blog.serializers.BlogSerializer']['required'] == ['id', 'title']
        assert 'blogs_sanic.blog.serializers.MessageSerializer' in definitions

    def test_summary_from_docstring(self, spec):
        operation = spec['paths']['/api/blogs']['post']

        assert operation['summary'] == 'Create a blog'
        assert operation['description'] == 'the id is assigned by the server'
        assert operation['tags'] == ['blogs']
        assert operation['operationId'] == 'blogs_sanic.blog.views.blog_create'

    def test_served_in_debug(self, client):
        _, response = client.get('/swagger/openapi')

        assert response.status == 200
        assert '/api/blogs/{blog_id}' in response.json['paths']


class TestHandlerMetaData:
    def test_path_params_must_match_uri(self):
        with pytest.raises(ValueError):
            HandlerMetaData('/api/blogs/<blog_id>', 'GET',
                            path_params={'id': serializers.IntField('id')})

    def test_undeclared_path_param(self):
        with pytest.raises(ValueError):
            HandlerMetaData('/api/blogs/<blog_id>', 'GET')

    def test_dict_declarations_become_serializers(self):
        metadata = HandlerMetaData('/api/blogs/<blog_id:int>', 'GET', tags=['b', 'a', 'b'],
                                   path_params={'blog_id': serializers.IntField('id')})

        assert isinstance(metadata.path_serializer, serializers.Serializer)
        assert metadata.tags == ['a', 'b']
        assert repr(metadata) == '<HandlerMetaData GET /api/blogs/<blog_id:int>>'
