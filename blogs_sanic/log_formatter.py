# -*- coding: utf-8 -*-

import datetime
import functools
import json
import logging
import os
import socket

from blogs_sanic import context_var, utils

# attributes passed by `extra=` in the access log, with their defaults
REQUEST_FIELDS = (
    ('request_uri', ''),
    ('trace_id', ''),
    ('remote_ip', ''),
    ('spent', None),
)


class JsonFormatter(logging.Formatter):
    """ one json object per record, for log collectors.
    trace_id falls back to the one of the current request.
    """

    def format(self, record):
        message = super().format(record)

        data = {
            '@timestamp': datetime.datetime.fromtimestamp(record.created, datetime.timezone.utc).isoformat(),
            'service.name': os.environ.get('PROJECT_NAME', 'blogs'),
            'log.level': record.levelname,
            'log.logger': record.name,
        }
        for name, default in REQUEST_FIELDS:
            data[name] = getattr(record, name, default)
        if not data['trace_id']:
            data['trace_id'] = utils.get_value(context_var.get(), 'trace_id', '')
        data.update({
            'local_ip': _local_ip(),
            'method_name': '%s.%s' % (record.module, record.funcName),
            'line_number': record.lineno,
            'thread_name': record.threadName,
            'message': message,
            'stack_trace': record.stack_info,
        })
        return json.dumps(data, default=str)


@functools.lru_cache(maxsize=None)
def _local_ip():
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        return ''
