"""Decoded form of a GraphQL introspection result."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar, Union

from gqlfetch.errors import DecodeError, GraphQLResponseError
from gqlfetch.typeref import TypeRef

logger = logging.getLogger(__name__)

T = TypeVar("T")

OBJECT = "OBJECT"
INTERFACE = "INTERFACE"
UNION = "UNION"
ENUM = "ENUM"
SCALAR = "SCALAR"
INPUT_OBJECT = "INPUT_OBJECT"


@dataclass(frozen=True)
class InputValue:
    """An argument of a field or directive, or a field of an input object."""

    name: str
    type: TypeRef
    description: str = ""
    default_value: str | None = None


@dataclass(frozen=True)
class Field:
    name: str
    type: TypeRef
    description: str = ""
    args: list[InputValue] = field(default_factory=list)
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass(frozen=True)
class EnumValue:
    name: str
    description: str = ""
    is_deprecated: bool = False
    deprecation_reason: str | None = None


@dataclass(frozen=True)
class ObjectType:
    name: str
    description: str = ""
    fields: list[Field] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    kind = OBJECT


@dataclass(frozen=True)
class InterfaceType:
    name: str
    description: str = ""
    fields: list[Field] = field(default_factory=list)
    interfaces: list[str] = field(default_factory=list)
    kind = INTERFACE


@dataclass(frozen=True)
class UnionType:
    name: str
    description: str = ""
    possible_types: list[TypeRef] = field(default_factory=list)
    kind = UNION


@dataclass(frozen=True)
class EnumType:
    name: str
    description: str = ""
    values: list[EnumValue] = field(default_factory=list)
    kind = ENUM


@dataclass(frozen=True)
class ScalarType:
    name: str
    description: str = ""
    kind = SCALAR


@dataclass(frozen=True)
class InputObjectType:
    name: str
    description: str = ""
    input_fields: list[InputValue] = field(default_factory=list)
    kind = INPUT_OBJECT


@dataclass(frozen=True)
class UnknownType:
    """A type definition whose kind is not one of the six GraphQL kinds."""

    kind: str
    name: str
    description: str = ""


TypeDefinition = Union[
    ObjectType,
    InterfaceType,
    UnionType,
    EnumType,
    ScalarType,
    InputObjectType,
    UnknownType,
]


@dataclass(frozen=True)
class Directive:
    name: str
    description: str = ""
    locations: list[str] = field(default_factory=list)
    args: list[InputValue] = field(default_factory=list)
    is_repeatable: bool = False


@dataclass(frozen=True)
class IntrospectionSchema:
    """The ``__schema`` object of an introspection result."""

    types: list[TypeDefinition]
    directives: list[Directive]
    query_type: str | None = None
    mutation_type: str | None = None
    subscription_type: str | None = None


def schema_from_response(payload: Any) -> IntrospectionSchema:
    """Check a full ``{"data", "errors"}`` response and decode its schema.

    Any entry in ``errors`` fails the conversion, even when ``data`` holds
    a partial schema.
    """
    if not isinstance(payload, dict):
        raise DecodeError("Introspection response must be a JSON object.")

    errors = payload.get("errors") or []
    if errors:
        if not isinstance(errors, list):
            errors = [errors]
        messages = [_error_message(error) for error in errors]
        raise GraphQLResponseError(messages)

    data = payload.get("data")
    if not isinstance(data, dict):
        raise DecodeError("Introspection response has no 'data' object.")
    if "__schema" not in data:
        raise DecodeError("Introspection response has no 'data.__schema' object.")
    return decode_schema(data["__schema"])


def decode_schema(data: Any) -> IntrospectionSchema:
    if not isinstance(data, dict):
        raise DecodeError("'__schema' must be a mapping.")
    if data.get("types") is None:
        raise DecodeError("'__schema' is missing its 'types'.")

    types = [decode_type_definition(item) for item in _list(data, "types", "schema")]
    directives = [
        decode_directive(item) for item in _list(data, "directives", "schema")
    ]
    schema = IntrospectionSchema(
        types=types,
        directives=directives,
        query_type=_root_name(data.get("queryType"), "queryType"),
        mutation_type=_root_name(data.get("mutationType"), "mutationType"),
        subscription_type=_root_name(
            data.get("subscriptionType"), "subscriptionType"
        ),
    )
    logger.debug(
        "Decoded introspection schema with %d type(s) and %d directive(s).",
        len(types),
        len(directives),
    )
    return schema


def decode_type_definition(data: Any) -> TypeDefinition:
    """Decode the common envelope, then the payload its ``kind`` calls for."""
    if not isinstance(data, dict):
        raise DecodeError(f"Type definition must be a mapping, got {data!r}.")

    kind = _require_str(data.get("kind"), "Type definition is missing its 'kind'.")
    name = _require_str(
        data.get("name"), f"Type definition of kind {kind} is missing its 'name'."
    )
    description = _description(data)
    where = f"type '{name}'"

    if kind == OBJECT:
        return ObjectType(
            name=name,
            description=description,
            fields=_decode_fields(data, where),
            interfaces=_decode_interfaces(data, where),
        )
    if kind == INTERFACE:
        return InterfaceType(
            name=name,
            description=description,
            fields=_decode_fields(data, where),
            interfaces=_decode_interfaces(data, where),
        )
    if kind == UNION:
        possible = _list(data, "possibleTypes", where)
        return UnionType(
            name=name,
            description=description,
            possible_types=[
                _wrap(TypeRef.from_dict, item, f"possible types of {where}")
                for item in possible
            ],
        )
    if kind == ENUM:
        values = _list(data, "enumValues", where)
        return EnumType(
            name=name,
            description=description,
            values=[
                _wrap(_decode_enum_value, item, f"enum values of {where}")
                for item in values
            ],
        )
    if kind == SCALAR:
        return ScalarType(name=name, description=description)
    if kind == INPUT_OBJECT:
        input_fields = _list(data, "inputFields", where)
        return InputObjectType(
            name=name,
            description=description,
            input_fields=[
                _wrap(decode_input_value, item, f"input fields of {where}")
                for item in input_fields
            ],
        )
    return UnknownType(kind=kind, name=name, description=description)


def decode_directive(data: Any) -> Directive:
    if not isinstance(data, dict):
        raise DecodeError(f"Directive definition must be a mapping, got {data!r}.")

    name = _require_str(data.get("name"), "Directive definition is missing its 'name'.")
    where = f"directive '@{name}'"
    locations = _list(data, "locations", where)
    for location in locations:
        if not isinstance(location, str):
            raise DecodeError(f"Cannot decode locations of {where}: {location!r}.")

    return Directive(
        name=name,
        description=_description(data),
        locations=list(locations),
        args=[
            _wrap(decode_input_value, item, f"arguments of {where}")
            for item in _list(data, "args", where)
        ],
        is_repeatable=bool(data.get("isRepeatable")),
    )


def decode_input_value(data: Any) -> InputValue:
    if not isinstance(data, dict):
        raise DecodeError(f"Input value must be a mapping, got {data!r}.")
    name = _require_str(data.get("name"), "Input value is missing its 'name'.")
    default = data.get("defaultValue")
    return InputValue(
        name=name,
        type=_decode_type(data, f"'{name}'"),
        description=_description(data),
        default_value=None if default is None else str(default),
    )


def _decode_fields(data: dict[str, Any], where: str) -> list[Field]:
    return [
        _wrap(_decode_field, item, f"fields of {where}")
        for item in _list(data, "fields", where)
    ]


def _decode_field(data: Any) -> Field:
    if not isinstance(data, dict):
        raise DecodeError(f"Field must be a mapping, got {data!r}.")
    name = _require_str(data.get("name"), "Field is missing its 'name'.")
    return Field(
        name=name,
        type=_decode_type(data, f"'{name}'"),
        description=_description(data),
        args=[
            _wrap(decode_input_value, item, f"arguments of field '{name}'")
            for item in _list(data, "args", f"field '{name}'")
        ],
        is_deprecated=bool(data.get("isDeprecated")),
        deprecation_reason=data.get("deprecationReason"),
    )


def _decode_enum_value(data: Any) -> EnumValue:
    if not isinstance(data, dict):
        raise DecodeError(f"Enum value must be a mapping, got {data!r}.")
    return EnumValue(
        name=_require_str(data.get("name"), "Enum value is missing its 'name'."),
        description=_description(data),
        is_deprecated=bool(data.get("isDeprecated")),
        deprecation_reason=data.get("deprecationReason"),
    )


def _decode_interfaces(data: dict[str, Any], where: str) -> list[str]:
    names: list[str] = []
    for item in _list(data, "interfaces", where):
        if not isinstance(item, dict):
            raise DecodeError(f"Cannot decode interfaces of {where}: {item!r}.")
        names.append(
            _require_str(
                item.get("name"), f"Cannot decode interfaces of {where}: missing name."
            )
        )
    return names


def _decode_type(data: dict[str, Any], owner: str) -> TypeRef:
    if data.get("type") is None:
        raise DecodeError(f"{owner} is missing its 'type'.")
    return _wrap(TypeRef.from_dict, data["type"], f"type of {owner}")


def _wrap(decode: Callable[[Any], T], item: Any, context: str) -> T:
    try:
        return decode(item)
    except DecodeError as exc:
        raise DecodeError(f"Cannot decode {context}: {exc}") from exc


def _list(data: dict[str, Any], key: str, where: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DecodeError(f"'{key}' of {where} must be a list, got {value!r}.")
    return value


def _root_name(value: Any, key: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DecodeError(f"'{key}' must be a mapping, got {value!r}.")
    name = value.get("name")
    return name if isinstance(name, str) else None


def _description(data: dict[str, Any]) -> str:
    value = data.get("description")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DecodeError(f"Description must be a string, got {value!r}.")
    return value


def _require_str(value: Any, context: str) -> str:
    if isinstance(value, str) and value:
        return value
    raise DecodeError(context)


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str):
            return message
    return str(error)


INTROSPECTION_QUERY_VERSION = "2021-10"

INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schema {
    queryType { name }
    mutationType { name }
    subscriptionType { name }
    types {
      ...FullType
    }
    directives {
      name
      description
      isRepeatable
      locations
      args {
        ...InputValue
      }
    }
  }
}

fragment FullType on __Type {
  kind
  name
  description
  fields(includeDeprecated: true) {
    name
    description
    args {
      ...InputValue
    }
    type {
      ...TypeRef
    }
    isDeprecated
    deprecationReason
  }
  inputFields {
    ...InputValue
  }
  interfaces {
    ...TypeRef
  }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes {
    ...TypeRef
  }
}

fragment InputValue on __InputValue {
  name
  description
  type { ...TypeRef }
  defaultValue
}

fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType {
          kind
          name
          ofType {
            kind
            name
            ofType {
              kind
              name
              ofType {
                kind
                name
              }
            }
          }
        }
      }
    }
  }
}
""".strip()


