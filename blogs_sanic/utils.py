# -*- coding: utf-8 -*-
import importlib
import re
from collections.abc import Mapping


def get_value(instance_or_dict, name, default=None):
    """ `name` of a mapping or an attribute of an object, `default` for None """
    if isinstance(instance_or_dict, Mapping):
        return instance_or_dict.get(name, default)
    return getattr(instance_or_dict, name, default)


def cls_str_of_obj(obj):
    if obj is None:
        return None
    return '%s.%s' % (type(obj).__module__, type(obj).__name__)


def meth_str(meth):
    if meth is None:
        return None
    return '%s.%s' % (meth.__module__, meth.__qualname__)


def import_from_str(obj_path):
    """ `blogs_sanic.views.exception_handler` -> the function """
    module_name, obj_name = obj_path.rsplit('.', 1)
    return getattr(importlib.import_module(module_name), obj_name)


path_param_re = re.compile(r'<([^<>:]+)(?::[^<>]*)?>')


def path_param_names(uri):
    """`/api/blogs/<blog_id:int>` -> ['blog_id']"""
    return path_param_re.findall(uri)


def swagger_path(uri):
    """`/api/blogs/<blog_id>` -> `/api/blogs/{blog_id}`"""
    return path_param_re.sub(r'{\1}', uri)


def without_nulls(dictionary):
    return {k: v for k, v in dictionary.items() if v is not None}
