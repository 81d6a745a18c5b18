import logging


def get_root_from_chunk(instance):
    while instance.father is not None:
        instance = instance.father

    return instance


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    strictly connected to the field named 'length': reading 'data' uses the
    value of 'length' and setting 'data' writes back 'length'.

    The expression is resolved like a relative python module path starting
    from the chunk containing the field: '.length' is the field named 'length'
    at the same level, '.header.length' is the field 'length' inside the
    sibling 'header'.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f'dependency \'{expression}\' must be relative (i.e. start with a dot)')

        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' for \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        # '.miao'.split(".") -> ['', 'miao']
        fields_path = self.expression.split('.')[1:]

        field = instance.father
        for component_name in fields_path:
            field = getattr(field, component_name)

        self.logger.debug(' resolved as field %s' % field.__class__.__name__)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        return self.resolve_field(instance).value

    def resolve_and_set(self, instance, value):
        self.resolve_field(instance).value = value


class PropertyDescriptor(object):
    """This the glue for dependency management: an attribute of a field
    that can be a plain value or a Dependency on another field."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type
        self.cache_name = f'_{name}_cache'  # the value when there is no father

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            if instance.father is None:
                return data.get(self.cache_name, 0)

            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        data = instance.__dict__

        if isinstance(value, Dependency) or not isinstance(data.get(self.name), Dependency):
            data[self.name] = value
            return

        # without a father there is nobody to propagate the value to
        if instance.father is None:
            data[self.cache_name] = value
            return

        data[self.name].resolve_and_set(instance, value)
