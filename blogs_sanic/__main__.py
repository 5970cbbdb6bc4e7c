# -*- coding: utf-8 -*-
import json
import logging
import logging.config
import os
import sys

from blogs_sanic import application, settings
from blogs_sanic.exceptions import ConfigError

logger = logging.getLogger('blogs_sanic')

# -----------  dev settings -------------
dev_settings = {
    'DEBUG': True,
    'DEV': True,
    'CORS': True
}


def bootstrap():
    settings.load(**dev_settings)

    # ----------- use config that is from environ to cover dev_settings ----------
    config_json = os.environ.get('CONFIG', '')
    if config_json:
        try:
            conf = json.loads(config_json)
        except ValueError:
            conf = None
            logger.warning('CONFIG is not valid json, ignored')
        if conf and isinstance(conf, dict):
            settings.load(**conf)

    logging.config.dictConfig(settings.get('LOGGING_CONFIG'))
    try:
        settings.load_env()
    except ConfigError as exc:
        logger.error('invalid configuration: %s', exc)
        sys.exit(1)

    return application.configure()


# sanic workers import this module again, so routes must be set up at import time
app = bootstrap()


def main():
    application.start()


# --------------------- main -----------------
if __name__ == '__main__':
    main()
