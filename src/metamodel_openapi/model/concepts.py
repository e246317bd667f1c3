"""Concepts of the API model consumed by the generators.

The model is built once (usually by the loader) and is treated as read-only
while documents are generated.
"""

from enum import Enum

from pydantic import BaseModel, Field


class TypeKind(str, Enum):
    """Closed set of type kinds."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    LONG = "long"
    FLOAT = "float"
    STRING = "string"
    DATE = "date"
    ENUM = "enum"
    STRUCT = "struct"
    LIST = "list"
    MAP = "map"


PRIMITIVE_KINDS = {
    TypeKind.BOOLEAN,
    TypeKind.INTEGER,
    TypeKind.LONG,
    TypeKind.FLOAT,
    TypeKind.STRING,
    TypeKind.DATE,
}


class EnumValue(BaseModel):
    """A single value of an enum type."""

    name: str
    doc: str = ""


class Type(BaseModel):
    """A data type.

    Enums carry `values`, structs carry `attributes` (and `is_class` when the
    objects have identity), lists and maps carry the `element` type. Map keys
    are always strings.
    """

    name: str
    kind: TypeKind
    doc: str = ""
    values: list[EnumValue] = []
    attributes: list["Attribute"] = Field(default_factory=list, repr=False)
    is_class: bool = False
    element: "Type | None" = None

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    @property
    def is_enum(self) -> bool:
        return self.kind == TypeKind.ENUM

    @property
    def is_struct(self) -> bool:
        return self.kind == TypeKind.STRUCT

    @property
    def is_list(self) -> bool:
        return self.kind == TypeKind.LIST

    @property
    def is_map(self) -> bool:
        return self.kind == TypeKind.MAP


class Attribute(BaseModel):
    """An attribute of a struct type."""

    name: str
    type: Type
    doc: str = ""


class Parameter(BaseModel):
    """A method parameter. Placement in the request is decided by the binding calculator."""

    name: str
    type: Type
    doc: str = ""
    is_in: bool = False
    is_out: bool = False


class Method(BaseModel):
    """An operation available on a resource."""

    name: str
    doc: str = ""
    parameters: list[Parameter] = []


class Resource(BaseModel):
    name: str
    doc: str = ""
    methods: list[Method] = []
    locators: list["Locator"] = Field(default_factory=list, repr=False)


class Locator(BaseModel):
    """One segment of a resource path, either fixed or a path variable."""

    name: str
    target: Resource = Field(repr=False)
    doc: str = ""
    variable: bool = False


class Path(BaseModel):
    """Sequence of locators leading from the root resource to a resource."""

    locators: list[Locator] = Field(min_length=1)

    @property
    def resource(self) -> Resource:
        return self.locators[-1].target


class Version(BaseModel):
    name: str
    doc: str = ""
    root: str = "Root"
    types: list[Type] = []
    resources: list[Resource] = []
    paths: list[Path] = []


class Service(BaseModel):
    name: str
    doc: str = ""
    versions: list[Version] = []


class Model(BaseModel):
    services: list[Service] = []


Type.model_rebuild()
Resource.model_rebuild()
Attribute.model_rebuild()
Parameter.model_rebuild()
Locator.model_rebuild()
Method.model_rebuild()
Path.model_rebuild()
Version.model_rebuild()
Service.model_rebuild()
Model.model_rebuild()
