import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()


# attributes that every field sets on itself in Field.__init__()
FIELD_INSTANCE_ATTRIBUTES = frozenset((
    'name',
    'father',
    'default',
    'offset',
    'endianess',
    'is_magic',
    'logger',
))


class FieldDescriptor(object):
    """Give each chunk instance its own copy of the field declared
    in the class body; the declared field acts only as template."""

    def __init__(self, template: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.template = template
        self.template.name = field_name

    @property
    def name(self):
        return self.template.name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self

        fields = instance.__dict__

        if self.name not in fields:
            self.logger.debug("instancing field '%s' for %s", self.name, instance.__class__.__name__)
            fields[self.name] = self.template.create(father=instance)

        return fields[self.name]

    def __set__(self, instance, value):
        if not isinstance(value, self.template.__class__):
            # a plain value like bytes or int
            self.__get__(instance).value = value
            return

        self.logger.debug("replacing field '%s' of %s", self.name, instance.__class__.__name__)

        value.father = instance
        value.name = self.name
        instance.__dict__[self.name] = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls._meta.fields:
            raise AttributeError(
                f"field '{name}' of {cls.__name__} is already declared by a parent chunk")

        if name in FIELD_INSTANCE_ATTRIBUTES or hasattr(cls, name):
            raise AttributeError(
                f"'{name}' is a reserved attribute of {cls.__name__} and can't be used as field name")

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Metadata of a chunk class: for now only the names of the fields
    in order of declaration, the parents' ones first."""

    def __init__(self, fields=None):
        self.fields = list(fields or [])

    @classmethod
    def from_bases(cls, bases):
        fields = []
        for base in bases:
            if not isinstance(base, MetaChunk):
                continue

            fields.extend(_ for _ in base._meta.fields if _ not in fields)

        return cls(fields)


class MetaChunk(type):
    '''Build the chunk classes: the fields found in the class body are
    removed from it and installed as FieldDescriptor, a la Django models.'''
    logger = logging.getLogger(__name__)

    def __new__(mcs, name, bases, attrs):
        declared = [(_k, _v) for _k, _v in attrs.items() if isinstance(_v, FieldBase)]
        body = {_k: _v for _k, _v in attrs.items() if not isinstance(_v, FieldBase)}

        new_cls = super().__new__(mcs, name, bases, body)
        new_cls._meta = Meta.from_bases(bases)

        for field_name, field in declared:
            new_cls.add_field(field_name, field)

        return new_cls

    def add_field(cls, name, field):
        cls.logger.debug("adding field '%s' (%s) to %s", name, field.__class__.__name__, cls.__name__)
        field.contribute_to_chunk(cls, name)
        cls._meta.fields.append(name)
