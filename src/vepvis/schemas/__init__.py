import json
import os
from collections.abc import Mapping

from jsonschema import Draft7Validator, validators

SCHEMA_FILE = os.path.join(os.path.dirname(__file__), 'config.json')


class ImmutableDict(Mapping):
    def __init__(self, data):
        self._data = data

    def __getitem__(self, key):
        return self._data[key]

    def __len__(self):
        return len(self._data)

    def __iter__(self):
        return iter(self._data)


def extend_with_default(validator_class):
    """
    validator which also fills in the schema defaults for missing properties
    """
    validate_properties = validator_class.VALIDATORS['properties']

    def set_defaults(validator, properties, instance, schema):
        for prop, subschema in properties.items():
            if 'default' in subschema and isinstance(instance, dict):
                instance.setdefault(prop, subschema['default'])
        yield from validate_properties(validator, properties, instance, schema)

    return validators.extend(validator_class, {'properties': set_defaults})


DefaultValidatingValidator = extend_with_default(Draft7Validator)


def load_schema():
    with open(SCHEMA_FILE, 'r') as fh:
        return json.load(fh)


def get_by_prefix(config, prefix):
    return {k.replace(prefix, ''): v for k, v in config.items() if k.startswith(prefix)}


DEFAULTS = {}
DefaultValidatingValidator(load_schema()).validate(DEFAULTS)
DEFAULTS = ImmutableDict(DEFAULTS)
