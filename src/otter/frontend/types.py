"""
Otter Type Signatures
=====================

This module defines the type signature attached to function arguments
and return types. A signature is the result of parsing the type grammar

    Type := '*'? IDENTIFIER ('<' Type '>')? ('[' ']')?

Modifiers compose in a single pass: a pointer mark before the base name,
one optional generic parameter, and an optional array suffix. For example
``*List<i32>[]`` is a pointer to an array of ``List<i32>``.

Primitive Types
---------------
| Name                  | Kind             |
|-----------------------|------------------|
| i8, i16, i32, i64     | signed integer   |
| u8, u16, u32, u64     | unsigned integer |
| f32, f64              | floating point   |
| bool                  | boolean          |

Every other name (``string``, user type names) is non-primitive.
"""

from dataclasses import dataclass
from typing import Optional


PRIMITIVE_TYPES: frozenset[str] = frozenset({
    "i8", "i16", "i32", "i64",
    "u8", "u16", "u32", "u64",
    "f32", "f64",
    "bool",
})


@dataclass(frozen=True)
class TypeSignature:
    """
    A parsed Otter type.

    Attributes:
        type_name: Base type name
        is_pointer: True if prefixed with '*'
        is_array: True if suffixed with '[]'
        has_generic: True if a generic parameter '<T>' follows the name
        generic_type: The generic parameter, or None
        is_primitive: True if type_name is one of PRIMITIVE_TYPES
    """
    type_name: str
    is_pointer: bool = False
    is_array: bool = False
    has_generic: bool = False
    generic_type: Optional["TypeSignature"] = None
    is_primitive: bool = False

    def __str__(self) -> str:
        """Render the signature in Otter source syntax."""
        text = self.type_name
        if self.is_pointer:
            text = "*" + text
        if self.has_generic and self.generic_type is not None:
            text += f"<{self.generic_type}>"
        if self.is_array:
            text += "[]"
        return text

    def to_dict(self) -> dict:
        """Return a JSON-serialisable mapping of this signature."""
        return {
            "typeName": self.type_name,
            "isPointer": self.is_pointer,
            "isArray": self.is_array,
            "hasGeneric": self.has_generic,
            "genericType": self.generic_type.to_dict() if self.generic_type else None,
            "isPrimitive": self.is_primitive,
        }


def make_type(
    type_name: str,
    is_pointer: bool = False,
    is_array: bool = False,
    generic_type: Optional[TypeSignature] = None,
) -> TypeSignature:
    """
    Build a TypeSignature, deriving has_generic and is_primitive.

    Example:
        >>> str(make_type("List", generic_type=make_type("i32"), is_array=True))
        'List<i32>[]'
    """
    return TypeSignature(
        type_name=type_name,
        is_pointer=is_pointer,
        is_array=is_array,
        has_generic=generic_type is not None,
        generic_type=generic_type,
        is_primitive=type_name in PRIMITIVE_TYPES,
    )
