# -*- coding: utf-8 -*-
import os

from blogs_sanic.exceptions import ConfigError

working_settings = {}

DEFAULTS = {
    'PROJECT_NAME': os.environ.get('PROJECT_NAME', 'blogs'),
    'PROJECT_VERSION': os.environ.get('PROJECT_VERSION', '1.0.0'),
    'HOST': '0.0.0.0',
    # string typed, read from environ by `load_env`
    'PORT': '3000',
    'WORKERS': 1,

    'DEV': False,
    'CORS': False,
    'DEBUG': False,

    'LOG_LEVEL': {
        'other': 'WARNING',
        'blogs_sanic': 'INFO',
    },
    'RESPONSE_SHAPE': 'blogs_sanic.views.ResponseShape',
    'EXCEPTION_HANDLER': 'blogs_sanic.views.exception_handler',
    'SEED_BLOGS': [
        {'id': 1, 'title': 'This is an experiment'},
        {'id': 2, 'title': 'Fastify is pretty cool'},
        {'id': 3, 'title': 'Just another blog, yea!'},
    ],

    'SWAGGER': {
        'info': {
            "version": os.environ.get('PROJECT_VERSION', '1.0.0'),
            "title": os.environ.get('PROJECT_NAME', 'Blogs API'),
            "description": 'in-memory CRUD API for blogs',
        },
        'schemes': ['http']
    },
}


def env_schema():
    """
    the environment variables read at startup, and how they are validated.
    a variable missing from the environment keeps its loaded setting.
    """
    from blogs_sanic import serializers

    return serializers.serializer_from({
        'PORT': serializers.StringField('PORT', help_text='port the http server listens on',
                                        regex=r'[0-9]+', default=get('PORT')),
    })


def load(**user_settings):
    working_settings.update(user_settings)


def load_env(environ=None):
    """
    validate `environ` (default `os.environ`) against `env_schema()` and load the result.
    :raise ConfigError: when some variable is invalid
    :return: loaded settings
    """
    from sanic.exceptions import SanicException

    environ = os.environ if environ is None else environ
    try:
        conf = env_schema().validate(dict(environ), {'location': 'env'})
    except SanicException as exc:
        raise ConfigError(str(exc)) from exc
    load(**conf)
    return conf


def logging_config():
    """
    dictConfig of the root logger and the `blogs_sanic` logger, levels from LOG_LEVEL.
    records are json (JsonFormatter) for log collectors, plain text when DEV.
    """
    levels = get('LOG_LEVEL')
    if get('DEV'):
        formatter = {
            'format': '%(asctime)s [%(process)d] [%(levelname)s] %(name)s: %(message)s',
            'datefmt': '[%Y-%m-%d %H:%M:%S %z]',
        }
    else:
        formatter = {'class': 'blogs_sanic.log_formatter.JsonFormatter'}

    loggers = {'': levels.get('other', 'WARNING'), 'blogs_sanic': levels.get('blogs_sanic', 'INFO')}
    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'default': formatter},
        'handlers': {
            name or 'root': {'class': 'logging.StreamHandler', 'formatter': 'default', 'level': level}
            for name, level in loggers.items()
        },
        'loggers': {
            name: {'level': level, 'handlers': [name or 'root'], 'propagate': False}
            for name, level in loggers.items()
        },
    }


def get(attr):
    if attr in working_settings:
        return working_settings[attr]
    if attr == 'LOGGING_CONFIG':
        return logging_config()
    try:
        return DEFAULTS[attr]
    except KeyError:
        raise AttributeError('Invalid setting: %r' % attr)


def __getattr__(name):
    return get(name)
