# =============================================================================
# tests/test_blogs_api.py - HTTP API Tests
# =============================================================================
# Requests go through sanic-testing's client, which runs the real server,
# so middleware, validation and the exception handler are all exercised.
# =============================================================================

import json

import pytest
from sanic import exceptions

from blogs_sanic import views


def error_body(status, error, message):
    return {'statusCode': status, 'error': error, 'message': message}


# =============================================================================
# Service routes
# =============================================================================

class TestServiceRoutes:
    def test_hello(self, client):
        _, response = client.get('/')

        assert response.status == 200
        assert response.json == {'hello': 'world'}

    def test_ping(self, client):
        _, response = client.get('/ping')

        assert response.status == 200
        assert response.json == {'ping': 'pong'}

    def test_unknown_route(self, client):
        _, response = client.get('/nowhere')

        assert response.status == 404
        assert response.json['statusCode'] == 404
        assert response.json['error'] == 'Not Found'

    def test_error_is_kept_on_the_request(self, client):
        request, response = client.get('/api/blogs/42')

        assert response.status == 404
        assert isinstance(request.ctx.exception, exceptions.NotFound)

    def test_success_has_no_error(self, client):
        request, response = client.get('/api/blogs/1')

        assert response.status == 200
        assert getattr(request.ctx, 'exception', None) is None

    def test_trace_id_is_echoed(self, client):
        _, response = client.get('/ping', headers={'X-TRACE-ID': 'abc123'})

        assert response.headers['X-TRACE-ID'] == 'abc123'

    def test_trace_id_is_generated(self, client):
        _, response = client.get('/ping')

        assert len(response.headers['X-TRACE-ID']) == 32


# =============================================================================
# Blogs
# =============================================================================

class TestListBlogs:
    def test_seeded(self, client):
        _, response = client.get('/api/blogs')

        assert response.status == 200
        assert response.json == [
            {'id': 1, 'title': 'This is an experiment'},
            {'id': 2, 'title': 'Fastify is pretty cool'},
            {'id': 3, 'title': 'Just another blog, yea!'},
        ]

    def test_trailing_slash(self, client):
        _, response = client.get('/api/blogs/')

        assert response.status == 200
        assert len(response.json) == 3

    def test_empty(self, client, store):
        for blog in store.all():
            store.delete(blog.id)

        _, response = client.get('/api/blogs')

        assert response.status == 200
        assert response.json == []


class TestGetBlog:
    def test_found(self, client):
        _, response = client.get('/api/blogs/2')

        assert response.status == 200
        assert response.json == {'id': 2, 'title': 'Fastify is pretty cool'}

    def test_not_found(self, client):
        _, response = client.get('/api/blogs/42')

        assert response.status == 404
        assert response.json == error_body(404, 'Not Found', 'Blog with ID 42 not found')

    def test_id_must_be_integer(self, client):
        _, response = client.get('/api/blogs/abc')

        assert response.status == 400
        assert response.json == error_body(400, 'Bad Request', 'params.blog_id should be integer')

    @pytest.mark.parametrize('blog_id', ['0_4', '+4', '%204', '%D9%A4'])
    def test_id_must_be_plain_digits(self, client, blog_id):
        _, response = client.get('/api/blogs/' + blog_id)

        assert response.status == 400
        assert response.json['message'] == 'params.blog_id should be integer'

    def test_id_must_be_positive(self, client):
        _, response = client.get('/api/blogs/0')

        assert response.status == 400
        assert response.json['message'] == 'params.blog_id should be >= 1'


class TestCreateBlog:
    def test_created(self, client, store):
        _, response = client.post('/api/blogs', json={'title': 'D'})

        assert response.status == 201
        assert response.json == {'id': 4, 'title': 'D'}
        assert store.get(4).title == 'D'

    def test_missing_title(self, client, store):
        _, response = client.post('/api/blogs', json={})

        assert response.status == 400
        assert response.json == error_body(400, 'Bad Request', "body should have required property 'title'")
        assert len(store) == 3

    def test_additional_property(self, client, store):
        _, response = client.post('/api/blogs', json={'title': 'D', 'id': 99})

        assert response.status == 400
        assert response.json['message'] == 'body should NOT have additional properties'
        assert 99 not in store

    def test_title_must_be_string(self, client):
        _, response = client.post('/api/blogs', json={'title': 5})

        assert response.status == 400
        assert response.json['message'] == 'body.title should be string'

    def test_empty_title(self, client):
        _, response = client.post('/api/blogs', json={'title': ''})

        assert response.status == 400
        assert response.json['message'] == 'body.title should NOT be shorter than 1 characters'

    def test_body_must_be_object(self, client):
        _, response = client.post('/api/blogs', json=['D'])

        assert response.status == 400
        assert response.json['message'] == 'body should be object'

    def test_invalid_json(self, client):
        _, response = client.post('/api/blogs', content='{"title": ',
                                  headers={'content-type': 'application/json'})

        assert response.status == 400
        assert response.json['message'] == 'body should be valid json'


class TestUpdateBlog:
    def test_updated(self, client, store):
        _, response = client.put('/api/blogs/1', json={'title': 'renamed'})

        assert response.status == 200
        assert response.json == {'id': 1, 'title': 'renamed'}
        assert [b.id for b in store.all()] == [1, 2, 3]

    def test_not_found(self, client, store):
        _, response = client.put('/api/blogs/42', json={'title': 'x'})

        assert response.status == 404
        assert response.json == error_body(404, 'Not Found', 'Blog with ID 42 not found')
        assert 42 not in store

    def test_invalid_body_is_checked_before_lookup(self, client):
        _, response = client.put('/api/blogs/42', json={})

        assert response.status == 400


class TestDeleteBlog:
    def test_deleted(self, client, store):
        _, response = client.delete('/api/blogs/2')

        assert response.status == 200
        assert response.json == {'msg': 'Blog with ID 2 is deleted'}
        assert 2 not in store

    def test_missing_blog_is_not_an_error(self, client, store):
        _, response = client.delete('/api/blogs/42')

        assert response.status == 200
        assert response.json == {'msg': 'Blog with ID 42 is deleted'}
        assert len(store) == 3


def test_delete_then_create(client):
    _, response = client.get('/api/blogs/2')
    assert response.json == {'id': 2, 'title': 'Fastify is pretty cool'}

    _, response = client.delete('/api/blogs/2')
    assert response.json == {'msg': 'Blog with ID 2 is deleted'}

    _, response = client.get('/api/blogs')
    assert [b['id'] for b in response.json] == [1, 3]

    _, response = client.post('/api/blogs', json={'title': 'D'})
    assert response.status == 201
    assert response.json == {'id': 4, 'title': 'D'}

    _, response = client.get('/api/blogs/2')
    assert response.status == 404


# =============================================================================
# Exception handler
# =============================================================================

class TestExceptionHandler:
    def test_server_error_hidden(self, restore_settings):
        restore_settings.load(DEBUG=False)

        response = views.exception_handler(None, RuntimeError('database password is hunter2'))

        assert response.status == 500
        assert json.loads(response.body) == error_body(500, 'Internal Server Error', 'Internal Server Error')

    def test_server_error_shown_in_debug(self, restore_settings):
        restore_settings.load(DEBUG=True)

        response = views.exception_handler(None, RuntimeError('boom'))

        assert json.loads(response.body) == error_body(500, 'Internal Server Error', 'boom')

    @pytest.mark.parametrize('exception, status, error', [
        (exceptions.NotFound('gone'), 404, 'Not Found'),
        (exceptions.BadRequest('bad'), 400, 'Bad Request'),
        (exceptions.MethodNotAllowed('no', 'PATCH', ['GET']), 405, 'Method Not Allowed'),
    ])
    def test_client_errors(self, restore_settings, exception, status, error):
        restore_settings.load(DEBUG=False)

        response = views.exception_handler(None, exception)

        assert response.status == status
        assert json.loads(response.body)['error'] == error
