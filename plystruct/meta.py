import copy
import logging


class FieldDescriptor(object):
    """Wrapper around field access of a Record related class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self

        data = instance.__dict__

        if self.field.name in data:
            return data[self.field.name]
        else:
            self.logger.debug("create new field for field named '%s'", self.field.name)
            new_field = self.field.create(father=instance)
            data[self.field.name] = new_field
            return data[self.field.name]

    def __set__(self, instance, value):
        data = instance.__dict__

        # if the value is the same type then set as it is
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            value.bind = self.field.bind
            data[self.field.name] = value
        # otherwise delegate to the field
        else:
            self.__get__(instance).set(value)


class FieldBase(object):

    def contribute_to_record(self, cls, name):
        if name not in cls.__dict__:
            setattr(cls, name, FieldDescriptor(self, name))
        else:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the record: the ordered names of the fields
    and the binding table from property name to field name."""

    def __init__(self):
        self.fields = []
        self.bindings = {}

    def bind(self, property_name, field_name):
        if property_name in self.bindings:
            raise AttributeError(
                f"fields '{self.bindings[property_name]}' and '{field_name}' bind the same property '{property_name}'")
        self.bindings[property_name] = field_name


class MetaRecord(type):
    logger = logging.getLogger(__name__)

    def __new__(cls, names, bases, attrs):
        '''The fields are collected at class creation so that decoding never
        needs to inspect the instance.'''
        module = attrs.pop('__module__')
        classcell = attrs.pop('__classcell__', None)

        new_attrs = {
            '__module__': module,
        }
        if classcell is not None:
            new_attrs['__classcell__'] = classcell
        new_cls = super(MetaRecord, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()

        # handle inheritance
        parents = [_ for _ in bases if isinstance(_, MetaRecord)]
        for parent in parents:
            for obj_name in parent._meta.fields:
                if obj_name in new_cls._meta.fields or obj_name in attrs:
                    continue
                descriptor = parent.__dict__[obj_name]
                setattr(new_cls, obj_name, descriptor)
                new_cls._meta.fields.append(obj_name)
                new_cls._meta.bind(descriptor.field.binding, obj_name)

        for obj_name, obj in attrs.items():
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        if hasattr(value, 'contribute_to_record'):
            cls.logger.debug('contribute_to_record() found for field \'%s\'' % name)
            cls._meta.fields.append(name)
            value.contribute_to_record(cls, name)
            cls._meta.bind(value.binding, name)
        else:
            setattr(cls, name, value)
