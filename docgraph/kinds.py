"""Node kind tags and modifier flags of the symbol graph."""

from enum import IntEnum, IntFlag


class Kind(IntEnum):
    """Closed set of node kinds produced by the declaration extractor."""

    UNKNOWN = 0
    MODULE = 1
    NAMESPACE = 2
    CLASS = 3
    INTERFACE = 4
    COMPONENT = 5
    ENUM = 6
    ENUM_MEMBER = 7
    FUNCTION = 8
    METHOD = 9
    PROPERTY = 10
    GETTER = 11
    SETTER = 12
    CONSTRUCTOR = 13
    TYPE_ALIAS = 14
    VARIABLE = 15
    CONSTANT = 16
    PARAMETER = 17
    ATTRIBUTE = 18
    EVENT = 19
    REFERENCE = 20
    ARRAY = 21
    TUPLE = 22
    TYPE_UNION = 23
    TYPE_INTERSECTION = 24
    CONDITIONAL_TYPE = 25
    MAPPED_TYPE = 26
    OBJECT_TYPE = 27
    INDEXED_TYPE = 28
    KEYOF = 29
    TYPEOF = 30
    INFER = 31
    PARENTHESIZED = 32
    THIS_TYPE = 33
    LITERAL = 34
    BASE_TYPE = 35
    TYPE_PARAMETER = 36
    FUNCTION_TYPE = 37
    CONSTRUCTOR_TYPE = 38
    INDEX_SIGNATURE = 39
    CALL_SIGNATURE = 40
    CONSTRUCT_SIGNATURE = 41
    EXPORT = 42
    IMPORT_TYPE = 43
    SPREAD = 44
    CLASS_TYPE = 45
    READONLY_KEYWORD = 46
    SYMBOL = 47
    UNKNOWN_TYPE = 48


class Flags(IntFlag):
    """Modifier bits attached to a node."""

    NONE = 0
    EXPORT = 1 << 0
    AMBIENT = 1 << 1
    STATIC = 1 << 2
    ABSTRACT = 1 << 3
    READONLY = 1 << 4
    OPTIONAL = 1 << 5
    REST = 1 << 6
    PUBLIC = 1 << 7
    PRIVATE = 1 << 8
    PROTECTED = 1 << 9
    OVERLOAD = 1 << 10
    DEPRECATED = 1 << 11
    INTERNAL = 1 << 12
    DEFAULT = 1 << 13
    DECLARATION_MERGE = 1 << 14
    EXTERNAL = 1 << 15
    DEFAULT_LIBRARY = 1 << 16


KIND_LABELS: dict[Kind, str] = {
    Kind.MODULE: "Module",
    Kind.NAMESPACE: "Namespace",
    Kind.CLASS: "Class",
    Kind.INTERFACE: "Interface",
    Kind.COMPONENT: "Component",
    Kind.ENUM: "Enum",
    Kind.ENUM_MEMBER: "Enum Member",
    Kind.FUNCTION: "Function",
    Kind.METHOD: "Method",
    Kind.PROPERTY: "Property",
    Kind.GETTER: "Getter",
    Kind.SETTER: "Setter",
    Kind.CONSTRUCTOR: "Constructor",
    Kind.TYPE_ALIAS: "Type Alias",
    Kind.VARIABLE: "Variable",
    Kind.CONSTANT: "Constant",
    Kind.ATTRIBUTE: "Attribute",
    Kind.EVENT: "Event",
    Kind.INDEX_SIGNATURE: "Index Signature",
    Kind.CALL_SIGNATURE: "Call Signature",
    Kind.CONSTRUCT_SIGNATURE: "Construct Signature",
    Kind.EXPORT: "Export",
}

GROUP_TITLES: dict[Kind, str] = {
    Kind.CONSTANT: "Constants",
    Kind.VARIABLE: "Variables",
    Kind.INTERFACE: "Interfaces",
    Kind.CLASS: "Classes",
    Kind.PROPERTY: "Properties",
    Kind.METHOD: "Methods",
    Kind.GETTER: "Getters",
    Kind.SETTER: "Setters",
    Kind.CONSTRUCTOR: "Constructor",
    Kind.FUNCTION: "Functions",
    Kind.ENUM: "Enums",
    Kind.ENUM_MEMBER: "Members",
    Kind.COMPONENT: "Components",
    Kind.ATTRIBUTE: "Attributes",
    Kind.TYPE_ALIAS: "Type Alias",
    Kind.CALL_SIGNATURE: "Call Signature",
    Kind.CONSTRUCT_SIGNATURE: "Construct Signature",
    Kind.EVENT: "Events",
    Kind.INDEX_SIGNATURE: "Index Signature",
    Kind.EXPORT: "Exports",
    Kind.NAMESPACE: "Namespaces",
}


def kind_label(kind: Kind) -> str:
    """Return the singular display label of a kind."""
    return KIND_LABELS.get(kind) or kind.name.replace("_", " ").title()


def group_title(kind: Kind) -> str:
    """Return the plural heading used for a group of members of one kind."""
    return GROUP_TITLES.get(kind) or kind_label(kind)


def parse_kind(value: object) -> Kind:
    """Coerce an enum name (``TypeUnion`` or ``TYPE_UNION``) or integer to a Kind."""
    if isinstance(value, Kind):
        return value
    if isinstance(value, int):
        return Kind(value)
    key = str(value).replace("_", "").lower()
    for kind in Kind:
        if kind.name.replace("_", "").lower() == key:
            return kind
    raise ValueError(f"Unknown node kind: {value!r}")


def parse_flags(value: object) -> Flags:
    """Coerce a list of flag names, a single name, or an integer to Flags."""
    if value is None:
        return Flags.NONE
    if isinstance(value, int):
        return Flags(value)
    names = [value] if isinstance(value, str) else list(value)  # type: ignore[call-overload]
    result = Flags.NONE
    for name in names:
        key = str(name).replace("_", "").lower()
        for flag in Flags:
            if flag.name and flag.name.replace("_", "").lower() == key:
                result |= flag
                break
        else:
            raise ValueError(f"Unknown node flag: {name!r}")
    return result
