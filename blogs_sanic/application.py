# -*- coding: utf-8 -*-
import logging
import logging.config
import time
import uuid

from sanic_cors import CORS

from blogs_sanic import settings, serializers, registry, context_var, utils
from blogs_sanic.app import BlogsSanic
from blogs_sanic.blog import blog, BlogStore

logger = logging.getLogger('blogs_sanic')

app = BlogsSanic('blogs_sanic')
registry.set('app', app)

TRACE_HEADER = 'X-TRACE-ID'


@app.middleware('request')
def init_context(request):
    context_var.set({
        'trace_id': request.headers.get(TRACE_HEADER) or uuid.uuid4().hex,
        'request_at': time.monotonic(),
    })


def _access_fields(request, ctx):
    uri = request.path
    if request.query_string:
        uri += '?' + request.query_string
    request_at = ctx.get('request_at')
    return {
        'remote_ip': request.remote_addr or request.ip,
        'request_uri': '%s %s' % (request.method, uri),
        'trace_id': ctx.get('trace_id', ''),
        'spent': int((time.monotonic() - request_at) * 1000) if request_at else None,
    }


@app.middleware('response')
def log_response(request, response):
    """ access log of every request, errors with the request body and the response body """
    extra = _access_fields(request, context_var.get() or {})
    if extra['trace_id']:
        response.headers[TRACE_HEADER] = extra['trace_id']

    exception = getattr(request.ctx, 'exception', None)
    if exception is None:
        logger.info('%s %s %sms', extra['request_uri'], response.status, extra['spent'], extra=extra)
    elif response.status >= 500:
        logger.error('%s %s\nrequest_body: %s\nresponse_body: %s',
                     extra['request_uri'], response.status, request.body, response.body,
                     extra=extra, exc_info=exception)
    else:
        logger.warning('%s %s\nrequest_body: %s\nresponse_body: %s',
                       extra['request_uri'], response.status, request.body, response.body, extra=extra)
    context_var.set(None)


@app.listener('after_server_start')
async def log_config(sanic):
    logger.info('server started with config: %s',
                {name: settings.get(name) for name in ('PORT', 'DEBUG', 'CORS', 'WORKERS')})


def handle_exception(request, exception):
    handler = utils.import_from_str(settings.get('EXCEPTION_HANDLER'))
    # read by `log_response`
    request.ctx.exception = exception
    return handler(request, exception)


def configure():
    """
    logging, CORS, the blog store, routes and the exception handler.
    settings should be loaded before, only the first call takes effect.
    :return: app
    """
    if registry.get('configured'):
        return app
    registry.set('configured', True)

    logging.config.dictConfig(settings.get('LOGGING_CONFIG'))

    if settings.get('CORS'):
        CORS(app, automatic_options=True, supports_credentials=True)

    app.ctx.blog_store = BlogStore.from_records(settings.get('SEED_BLOGS'))

    @app.get('/', response_serializer={'hello': serializers.StringField('Hello', required=True)},
             swagger_exclude=True)
    async def hello(request, *args, **kwargs):
        return {'hello': 'world'}

    @app.get('/ping', response_serializer={'ping': serializers.StringField('Ping-Pong', required=True)})
    async def ping(request, *args, **kwargs):
        """
        liveness probe
        """
        return {'ping': 'pong'}

    app.blueprint(blog)

    if settings.get('DEBUG'):
        from blogs_sanic.openapi import blueprint as swagger_blueprint
        app.blueprint(swagger_blueprint)

    app.exception(Exception)(handle_exception)

    for method, uri in registry.get_group('routes'):
        logger.info('Registered route: %s %s', method, uri)

    return app


def start(host=None, port=None, workers=None, **kwargs):
    """
    load settings before: `settings.load(**user_settings)` and `settings.load_env()`.
    other kwargs are passed to `app.run`
    """
    configure()
    kwargs.setdefault('access_log', False)
    app.run(host=host or settings.get('HOST'),
            port=port or int(settings.get('PORT')),
            workers=workers or settings.get('WORKERS'),
            **kwargs)
