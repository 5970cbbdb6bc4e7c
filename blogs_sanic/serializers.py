# -*- coding: utf-8 -*-
import inspect
import numbers
import re
from collections import OrderedDict
from collections.abc import Iterable, Mapping

from . import utils
from .exceptions import ValidationError

__all__ = ['StringField', 'NumberField', 'IntField', 'FloatField', 'BooleanField', 'SerializerField',
           'ListField', 'Serializer', 'ListSerializer']


class _Undefined:
    """ value of a field that was not supplied at all, falsy like None """
    __slots__ = ()

    def __repr__(self):
        return 'Undefined'

    def __bool__(self):
        return False


Undefined = _Undefined()

# swagger definitions of named serializers, by class path
definitions = {}


def location_of(context=None):
    return utils.get_value(context, 'location') or 'data'


def _collect_validators(bases, attrs):
    names = []
    for base in reversed(bases):
        names += [n for n in getattr(base, '_validators', ()) if n not in names]
    names += [n for n in attrs if n.startswith('validate_') and n not in names]
    return tuple(names)


# ---------------------- Field -----------------------

class FieldMeta(type):
    """
    merges `MESSAGES` along the bases and collects the `validate_*` methods, bases first.
    """

    def __new__(mcs, name, bases, attrs):
        messages = {}
        for base in reversed(bases):
            messages.update(getattr(base, 'MESSAGES', {}))
        messages.update(attrs.get('MESSAGES', {}))

        attrs['MESSAGES'] = messages
        attrs['_validators'] = _collect_validators(bases, attrs)
        return super().__new__(mcs, name, bases, attrs)


class BaseField(metaclass=FieldMeta):
    """A value inside a Serializer.

    Untrusted input goes through `coerce` and then through every `validate_*`
    method, in the order they are declared along the class hierarchy. A missing
    value (None) is only checked by `validate_required`.

    Messages are formatted with the path of the value, such as ``body.title``.

    :param label: short human-readable name, used in the swagger description
    :param help_text: what the value is for, appended to the description
    :param required: None (or no value at all) is invalid. Default: False.
    :param default: value (or callable returning it) used when none is supplied
    :param choices: the only acceptable values
    :param validators: extra callables `(value, context)` run after the built-in ones
    :param serialize_when_none: whether `to_primitive` of the owner keeps the key
           when the value is None. Default: True.
    :param messages: overrides of `MESSAGES`
    :param read_only: only in responses, ignored when validating requests
    :param write_only: only in requests, never serialized
    """
    primitive_type = None
    swagger_type = None

    MESSAGES = {
        'required': "{0} should have required property '{1}'",
        'choices': "{0} should be equal to one of the allowed values {1}",
    }

    def __init__(self, label=None, help_text=None, required=False,
                 default=Undefined, choices=None, validators=None,
                 serialize_when_none=True, messages=None, read_only=None, write_only=None):
        assert not (required and default is not Undefined), 'May not set both `required` and `default`'
        assert not (read_only and write_only), 'May not set both `read_only` and `write_only`'
        if choices is not None and (isinstance(choices, str) or not isinstance(choices, Iterable)):
            raise TypeError('"choices" must be a non-string Iterable')

        self._label = label
        self.help_text = help_text
        self.required = required
        self._default = default
        self.choices = choices
        self.validators = [getattr(self, name) for name in self._validators] + list(validators or [])
        self.serialize_when_none = serialize_when_none
        self.messages = dict(self.MESSAGES, **(messages or {}))
        self.read_only = read_only
        self.write_only = write_only

        self.name = None
        self.owner_serializer = None

    def __repr__(self):
        owner = ' on %s' % self.owner_serializer.__name__ if self.owner_serializer else ''
        name = " as '%s'" % self.name if self.name else ''
        return '<%s instance%s%s>' % (self.__class__.__name__, owner, name)

    def _setup(self, field_name, owner_serializer):
        """ called once the owner serializer class exists """
        assert issubclass(owner_serializer, BaseSerializer), 'owner_serializer should be subclass of BaseSerializer'
        self.name = field_name
        self.owner_serializer = owner_serializer

    @property
    def label(self):
        return self._label or self.name

    @property
    def default(self):
        return self._default() if callable(self._default) else self._default

    def path_of(self, context=None):
        """`location.name`, eg. `body.title`"""
        location = utils.get_value(context, 'location')
        return '.'.join(i for i in [location, self.name] if i) or self.label or 'data'

    def error(self, key, context=None, *args):
        return ValidationError(self.messages[key].format(self.path_of(context), *args))

    def coerce(self, value, context=None):
        """ untrusted, not None value -> native value
        :raise ValidationError: when it can not be converted
        """
        return value

    def _coerce_or_default(self, value, context=None):
        if value is not None:
            value = self.coerce(value, context)
        if value is None and self._default is not Undefined:
            value = self.default
        return value

    def to_native(self, value, context=None):
        return self._coerce_or_default(value, context)

    def to_primitive(self, value, context=None):
        value = self._coerce_or_default(value, context)
        if value is None or self.primitive_type is None or isinstance(value, self.primitive_type):
            return value
        return self.primitive_type(value)

    def validate(self, value, context=None):
        value = self.to_native(value, context)
        if value is None or value is Undefined:
            self.validate_required(value, context)
            return value
        for validator in self.validators:
            validator(value, context)
        return value

    def validate_required(self, value, context=None):
        if self.required and (value is None or value is Undefined):
            raise ValidationError(self.messages['required'].format(location_of(context), self.name))

    def validate_choices(self, value, context=None):
        if self.choices is not None and value not in self.choices:
            raise self.error('choices', context, list(self.choices))

    def schema_keywords(self):
        """ swagger keywords of the constraints, None values are dropped """
        return {}

    def openapi_spec(self):
        spec = dict(self.swagger_type or {})
        spec.update({
            'required': self.required,
            'name': self.name,
            'description': ':'.join(i for i in [self.label, self.help_text] if i),
        })
        if self.choices:
            spec['enum'] = list(self.choices)
        if self._default is not Undefined and not callable(self._default):
            spec['default'] = self._default
        if self.read_only is not None:
            spec['readOnly'] = self.read_only
        if self.write_only is not None:
            spec['writeOnly'] = self.write_only
        spec.update((k, v) for k, v in self.schema_keywords().items() if v is not None)
        return spec


class StringField(BaseField):
    """
    :param strict: only `str` (and utf-8 `bytes`) is accepted if True,
           otherwise numbers are converted by `str()`.
    """
    primitive_type = str
    swagger_type = {'type': 'string'}

    MESSAGES = {
        'type': "{0} should be string",
        'decode': "{0} should be utf-8 encoded",
        'max_length': "{0} should NOT be longer than {1} characters",
        'min_length': "{0} should NOT be shorter than {1} characters",
        'regex': '{0} should match pattern "{1}"',
    }

    def __init__(self, label=None, regex=None, max_length=None, min_length=None, strict=False, **kwargs):
        super().__init__(label, **kwargs)
        self.regex = re.compile(regex) if regex else None
        self.max_length = max_length
        self.min_length = min_length
        self.strict = strict

    def coerce(self, value, context=None):
        if isinstance(value, bytes):
            try:
                value = value.decode('utf-8')
            except UnicodeDecodeError:
                raise self.error('decode', context)
        if isinstance(value, str):
            return value
        # bool is a Number too
        if not self.strict and isinstance(value, numbers.Number):
            return str(value)
        raise self.error('type', context)

    def validate_length(self, value, context=None):
        if self.max_length is not None and len(value) > self.max_length:
            raise self.error('max_length', context, self.max_length)
        if self.min_length is not None and len(value) < self.min_length:
            raise self.error('min_length', context, self.min_length)

    def validate_regex(self, value, context=None):
        if self.regex is not None and not self.regex.fullmatch(value):
            raise self.error('regex', context, self.regex.pattern)

    def schema_keywords(self):
        return {
            'minLength': self.min_length,
            'maxLength': self.max_length,
            'pattern': self.regex.pattern if self.regex else None,
        }


class NumberField(BaseField):
    """
    :param strict: `1.2` and `true` are rejected by IntField if True;
           if False `1.2` becomes `1` and `true` becomes `1`.
           plain numeric strings such as `"12"` are always accepted, path and query params are strings.
    """
    native_type = None
    number_type = None
    # strings accepted by `coerce`
    string_re = None

    MESSAGES = {
        'number_coerce': "{0} should be {1}",
        'number_min': "{0} should be >= {1}",
        'number_max': "{0} should be <= {1}",
    }

    def __init__(self, label=None, min_value=None, max_value=None, strict=True, **kwargs):
        super().__init__(label, **kwargs)
        self.min_value = min_value
        self.max_value = max_value
        self.strict = strict

    def coerce(self, value, context=None):
        if isinstance(value, bool):
            if self.strict:
                raise self.error('number_coerce', context, self.number_type)
            value = int(value)
        if isinstance(value, self.native_type):
            return value
        if isinstance(value, str) and not self.string_re.fullmatch(value):
            raise self.error('number_coerce', context, self.number_type)
        try:
            native_value = self.native_type(value)
        except (TypeError, ValueError, ArithmeticError):
            raise self.error('number_coerce', context, self.number_type)
        # 1.5 is not an integer
        if self.strict and isinstance(value, numbers.Number) and native_value != value:
            raise self.error('number_coerce', context, self.number_type)
        return native_value

    def validate_range(self, value, context=None):
        if self.min_value is not None and value < self.min_value:
            raise self.error('number_min', context, self.min_value)
        if self.max_value is not None and value > self.max_value:
            raise self.error('number_max', context, self.max_value)

    def schema_keywords(self):
        return {
            'minimum': self.min_value,
            'maximum': self.max_value,
        }


class IntField(NumberField):
    primitive_type = int
    native_type = int
    number_type = 'integer'
    string_re = re.compile(r'-?[0-9]+')
    swagger_type = {'type': 'integer', 'format': 'int64'}


class FloatField(NumberField):
    primitive_type = float
    native_type = float
    number_type = 'number'
    string_re = re.compile(r'-?[0-9]+(\.[0-9]+)?([eE][-+]?[0-9]+)?')
    swagger_type = {'type': 'number', 'format': 'double'}


class BooleanField(BaseField):
    """ besides True and False, accepts "true"/"True"/"1", "false"/"False"/"0", 1 and 0 """

    primitive_type = bool
    swagger_type = {'type': 'boolean'}

    TRUE_VALUES = ('True', 'true', '1')
    FALSE_VALUES = ('False', 'false', '0')

    MESSAGES = {
        'type': "{0} should be boolean",
    }

    def coerce(self, value, context=None):
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value in self.TRUE_VALUES + self.FALSE_VALUES:
            return value in self.TRUE_VALUES
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise self.error('type', context)


class SerializerField(BaseField):
    """ an object nested in another one, checked by `serializer` """
    primitive_type = dict

    def __init__(self, label=None, serializer=None, **kwargs):
        assert 'default' not in kwargs, 'SerializerField cannot set default'
        if not isinstance(serializer, Serializer):
            raise TypeError('serializer must be instance of Serializer')
        super().__init__(label, **kwargs)
        self.serializer = serializer
        serializer._setup(self)

    def nested_context(self, context=None):
        return dict(context or {}, location=self.path_of(context))

    def to_native(self, value, context=None):
        if value is None:
            return None
        return self.serializer.to_native(value, self.nested_context(context))

    def to_primitive(self, value, context=None):
        if value is None:
            return None
        return self.serializer.to_primitive(value, context)

    def validate(self, value, context=None):
        if value is None:
            self.validate_required(value, context)
            return None
        value = self.serializer.validate(value, self.nested_context(context))
        for validator in self.validators:
            validator(value, context)
        return value

    def openapi_spec(self):
        return dict(self.serializer.openapi_spec(), **super().openapi_spec())


def ensure_sequence(value, error):
    """ `value` itself if it is list-like, strings and mappings are not.
    :param error: raised otherwise
    """
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise error
    return value


class ListField(BaseField):
    """A list whose items are all checked by `field`::

        tags = ListField('tags', StringField('tag name'))
    """

    primitive_type = list
    swagger_type = {'type': 'array'}

    MESSAGES = {
        'type': "{0} should be array",
        'min_size': "{0} should NOT have fewer than {1} items",
        'max_size': "{0} should NOT have more than {1} items",
    }

    def __init__(self, label=None, field=None, min_size=None, max_size=None, **kwargs):
        if not isinstance(field, BaseField):
            raise TypeError('field must be instance of BaseField')
        super().__init__(label, **kwargs)
        self.field = field
        self.min_size = min_size
        self.max_size = max_size

    def item_context(self, index, context=None):
        return dict(context or {}, location='%s[%d]' % (self.path_of(context), index))

    def coerce(self, value, context=None):
        return ensure_sequence(value, self.error('type', context))

    def to_native(self, value, context=None):
        items = self._coerce_or_default(value, context) or []
        natives = (self.field.to_native(item, self.item_context(i, context)) for i, item in enumerate(items))
        return [item for item in natives if item is not None]

    def to_primitive(self, value, context=None):
        items = self._coerce_or_default(value, context) or []
        primitives = (self.field.to_primitive(item, context) for item in items)
        return [item for item in primitives if item is not None]

    def validate(self, value, context=None):
        data = []
        if value is None:
            self.validate_required(value, context)
        else:
            for index, item in enumerate(self.coerce(value, context)):
                item = self.field.validate(item, self.item_context(index, context))
                if item is not None:
                    data.append(item)

        for validator in self.validators:
            validator(data, context)
        return data

    def validate_size(self, value, context=None):
        if self.min_size is not None and len(value) < self.min_size:
            raise self.error('min_size', context, self.min_size)
        if self.max_size is not None and len(value) > self.max_size:
            raise self.error('max_size', context, self.max_size)

    def schema_keywords(self):
        return {
            'items': self.field.openapi_spec(),
            'minItems': self.min_size,
            'maxItems': self.max_size,
        }


# ---------------------- Serializer ------------------------

class SerializerMeta(type):
    """
    collects the declared fields, the `validate_*` methods and the `Meta` options
    along the bases, then sets up the fields declared on this class.
    """

    def __new__(mcs, name, bases, attrs):
        fields = OrderedDict()
        meta = {}
        for base in reversed(bases):
            fields.update(getattr(base, '_fields', {}))
            meta.update(getattr(base, '_meta', {}))

        declared = [(k, v) for k, v in attrs.items() if isinstance(v, BaseField)]
        fields.update(declared)

        options = attrs.get('Meta')
        if inspect.isclass(options):
            meta.update((k, v) for k, v in vars(options).items() if not k.startswith('__'))

        attrs['_fields'] = fields
        attrs['_meta'] = meta
        attrs['_validators'] = _collect_validators(bases, attrs)

        cls = super().__new__(mcs, name, bases, attrs)
        for field_name, field in declared:
            field._setup(field_name, cls)
        return cls


class BaseSerializer(metaclass=SerializerMeta):
    """
    :param validators: extra callables `(data, context) -> data`, run after the fields
    """

    MESSAGES = {
        'object': "{0} should be object",
        'array': "{0} should be array",
        'additional': "{0} should NOT have additional properties",
    }

    def __init__(self, validators=None):
        self.fields = OrderedDict(self._fields)
        self.validators = [getattr(self, name) for name in self._validators] + list(validators or [])
        self.parent_field = None

    def _setup(self, parent_field):
        assert isinstance(parent_field, BaseField), 'parent_field should be instance of BaseField'
        self.parent_field = parent_field

    def to_native(self, data, context=None):
        raise NotImplementedError

    def to_primitive(self, data, context=None):
        raise NotImplementedError

    def validate(self, data, context=None):
        raise NotImplementedError

    def openapi_spec(self):
        raise NotImplementedError


def field_from(data):
    if isinstance(data, BaseField):
        return data
    if isinstance(data, (BaseSerializer, dict)):
        return SerializerField(serializer=serializer_from(data))
    if isinstance(data, list):
        assert len(data) == 1
        return ListField(field=field_from(data[0]))


def serializer_from(data):
    """
    build a serializer from a declaration such as `{'blog_id': IntField('blog id')}`
    or `[{'name': StringField()}]`
    """
    assert not isinstance(data, BaseField)
    if isinstance(data, BaseSerializer):
        return data
    if isinstance(data, dict):
        serializer = Serializer()
        for field_name, field_data in data.items():
            field = field_from(field_data)
            field._setup(field_name, Serializer)
            serializer.fields[field_name] = field
        return serializer
    if isinstance(data, list):
        assert len(data) == 1
        return ListSerializer(child=serializer_from(data[0]))


def _field_data(data, field_name):
    if isinstance(data, Mapping):
        return data.get(field_name)
    return getattr(data, field_name, None)


class Serializer(BaseSerializer):
    """
    Fields are declared as class attributes::

        class BlogSerializer(Serializer):
            id = IntField('blog id', required=True)
            title = StringField('blog title', required=True)

            class Meta:
                additional_properties = False

    `Meta.additional_properties = False` rejects keys that are not declared,
    `Meta.serialize_when_none` overrides the option of every field.
    `BlogSerializer(many=True)` is a `ListSerializer` of `BlogSerializer`.
    """

    def __new__(cls, *args, many=False, **kwargs):
        if many:
            return ListSerializer(child=cls(*args, **kwargs))
        return super().__new__(cls)

    def __init__(self, *args, many=False, **kwargs):
        super().__init__(*args, **kwargs)

        cls_str = utils.cls_str_of_obj(self)
        if type(self) is not Serializer and cls_str not in definitions:
            definitions[cls_str] = self.definition

    @property
    def additional_properties(self):
        return self._meta.get('additional_properties', True)

    def _serialize_when_none(self, field, context):
        default = self._meta.get('serialize_when_none', field.serialize_when_none)
        return utils.get_value(context, 'serialize_when_none', default)

    def to_native(self, data, context=None):
        if data is None or data is Undefined:
            return None
        return {name: field.to_native(_field_data(data, name), context) for name, field in self.fields.items()}

    def validate(self, data, context=None):
        """
        `data` should be a mapping, read only fields are skipped.
        """
        location = location_of(context)
        if not isinstance(data, Mapping):
            raise ValidationError(self.MESSAGES['object'].format(location))
        if not self.additional_properties and not set(data).issubset(self.fields):
            raise ValidationError(self.MESSAGES['additional'].format(location))

        result = {}
        for name, field in self.fields.items():
            value = data.get(name)
            if field.read_only:
                continue
            result[name] = field.validate(value, context)

        for validator in self.validators:
            result = validator(result, context)
        return result

    def to_primitive(self, data, context=None):
        if data is None:
            return None
        result = {}
        for name, field in self.fields.items():
            value = _field_data(data, name)
            if field.write_only or (value is None and not self._serialize_when_none(field, context)):
                continue
            result[name] = field.to_primitive(value, context)
        return result

    @property
    def definition(self):
        properties = {}
        required = []
        for name, field in self.fields.items():
            spec = field.openapi_spec()
            spec.pop('name', None)
            if spec.pop('required', False):
                required.append(name)
            properties[name] = spec

        definition = {'type': 'object', 'required': required, 'properties': properties}
        if not self.additional_properties:
            definition['additionalProperties'] = False
        return definition

    def openapi_spec(self):
        # named serializers are referenced, ad hoc ones are inlined
        if type(self) is Serializer:
            return self.definition
        return {'$ref': '#/definitions/%s' % utils.cls_str_of_obj(self)}


class ListSerializer(BaseSerializer):
    def __init__(self, child, **kwargs):
        if not isinstance(child, BaseSerializer):
            raise TypeError('child must be instance of BaseSerializer')
        super().__init__(**kwargs)
        self.child = child

    def _items(self, data, context):
        if data is None or data is Undefined:
            return []
        return ensure_sequence(data, ValidationError(self.MESSAGES['array'].format(location_of(context))))

    def to_native(self, data, context=None):
        natives = (self.child.to_native(item, context) for item in self._items(data, context))
        return [item for item in natives if item is not None]

    def to_primitive(self, data, context=None):
        primitives = (self.child.to_primitive(item, context) for item in self._items(data, context))
        return [item for item in primitives if item is not None]

    def validate(self, data, context=None):
        location = location_of(context)
        items = ensure_sequence(data, ValidationError(self.MESSAGES['array'].format(location)))
        data = [self.child.validate(item, dict(context or {}, location='%s[%d]' % (location, index)))
                for index, item in enumerate(items)]

        for validator in self.validators:
            data = validator(data, context)
        return data

    def openapi_spec(self):
        return {
            'type': 'array',
            'items': self.child.openapi_spec(),
        }
