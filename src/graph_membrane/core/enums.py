"""Enumerations used across the membrane."""

from enum import Enum


class OperationKind(str, Enum):
    """Fundamental operations a customization handler may override.

    The value is the handler method name.
    """

    GET_PROTOTYPE_OF = "get_prototype_of"
    SET_PROTOTYPE_OF = "set_prototype_of"
    IS_EXTENSIBLE = "is_extensible"
    PREVENT_EXTENSIONS = "prevent_extensions"
    GET_OWN_PROPERTY_DESCRIPTOR = "get_own_property_descriptor"
    DEFINE_PROPERTY = "define_property"
    HAS = "has"
    GET = "get"
    SET = "set"
    DELETE_PROPERTY = "delete_property"
    OWN_KEYS = "own_keys"
    APPLY = "apply"
    CONSTRUCT = "construct"


class StandInKind(str, Enum):
    PLAIN = "plain"
    LIST = "list"
    CALLABLE = "callable"
    CONSTRUCTABLE = "constructable"
    ERROR = "error"  # Raisable wrappers need an exception base
