"""JSON Schema generation for model types.

SchemaReferenceResolver writes the schema used wherever a type is referenced,
TypeSchemaEmitter writes the named schemas of `components.schemas`.
"""

from metamodel_openapi.binding import BindingCalculator
from metamodel_openapi.buffer import Buffer
from metamodel_openapi.model.concepts import Attribute, Type, TypeKind, Version
from metamodel_openapi.names import NamesCalculator
from metamodel_openapi.reporter import Reporter

SCHEMAS_PREFIX = "#/components/schemas/"
ERROR_SCHEMA = "Error"

# Inline schemas of the primitive kinds, as (field, value) pairs in output order
_PRIMITIVE_SCHEMAS: dict[TypeKind, tuple[tuple[str, str], ...]] = {
    TypeKind.BOOLEAN: (("type", "boolean"),),
    TypeKind.INTEGER: (("type", "integer"), ("format", "int32")),
    TypeKind.LONG: (("type", "integer"), ("format", "int64")),
    TypeKind.FLOAT: (("type", "number"), ("format", "float")),
    TypeKind.STRING: (("type", "string"),),
    TypeKind.DATE: (("type", "string"), ("format", "date-time")),
}


def generate_description(buffer: Buffer, doc: str) -> None:
    if doc:
        buffer.field("description", doc)


class SchemaReferenceResolver:
    """Writes the schema of a type reference into the currently open object."""

    def __init__(self, names: NamesCalculator, reporter: Reporter):
        self.names = names
        self.reporter = reporter

    def generate(self, buffer: Buffer, typ: Type) -> None:
        """Write an inline schema for primitives, lists and maps, a `$ref` otherwise.

        Types of unknown kind are reported and leave the object as it is.
        """
        kind = typ.kind
        if kind in _PRIMITIVE_SCHEMAS:
            for key, value in _PRIMITIVE_SCHEMAS[kind]:
                buffer.field(key, value)
        elif kind in (TypeKind.ENUM, TypeKind.STRUCT):
            buffer.field("$ref", SCHEMAS_PREFIX + self.names.schema_name(typ))
        elif kind == TypeKind.LIST:
            buffer.field("type", "array")
            with buffer.object("items"):
                self.generate(buffer, typ.element)
        elif kind == TypeKind.MAP:
            buffer.field("type", "object")
            with buffer.object("additionalProperties"):
                self.generate(buffer, typ.element)
        else:
            self.reporter.error(
                "Don't know how to generate schema reference for type '%s'",
                typ.name,
            )


class TypeSchemaEmitter:
    """Writes the named schemas of a version, followed by the `Error` schema."""

    def __init__(
        self,
        names: NamesCalculator,
        binding: BindingCalculator,
        resolver: SchemaReferenceResolver,
    ):
        self.names = names
        self.binding = binding
        self.resolver = resolver

    def generate(self, buffer: Buffer, version: Version) -> None:
        for typ in version.types:
            if typ.is_enum:
                self._generate_enum(buffer, typ)
            elif typ.is_struct:
                self._generate_struct(buffer, typ)
        self._generate_error(buffer)

    def _generate_enum(self, buffer: Buffer, typ: Type) -> None:
        with buffer.object(self.names.schema_name(typ)):
            generate_description(buffer, typ.doc)
            buffer.field("type", "string")
            with buffer.array("enum"):
                for value in typ.values:
                    buffer.item(self.binding.enum_value_name(value))

    def _generate_struct(self, buffer: Buffer, typ: Type) -> None:
        name = self.names.schema_name(typ)
        with buffer.object(name):
            generate_description(buffer, typ.doc)
            with buffer.object("properties"):
                if typ.is_class:
                    self._generate_identity(buffer, name)
                for attribute in typ.attributes:
                    self._generate_property(buffer, attribute)

    def _generate_identity(self, buffer: Buffer, name: str) -> None:
        with buffer.object("kind"):
            generate_description(
                buffer,
                f"Indicates the type of this object. Will be '{name}' if this is a complete "
                f"object or '{name}Link' if it is just a link.",
            )
            buffer.field("type", "string")
        with buffer.object("id"):
            generate_description(buffer, "Unique identifier of the object.")
            buffer.field("type", "string")
        with buffer.object("href"):
            generate_description(buffer, "Self link.")
            buffer.field("type", "string")

    def _generate_property(self, buffer: Buffer, attribute: Attribute) -> None:
        with buffer.object(self.names.attribute_property_name(attribute)):
            generate_description(buffer, attribute.doc)
            self.resolver.generate(buffer, attribute.type)

    def _generate_error(self, buffer: Buffer) -> None:
        with buffer.object(ERROR_SCHEMA):
            buffer.field("type", "object")
            with buffer.object("properties"):
                with buffer.object("kind"):
                    generate_description(
                        buffer, "Indicates the type of this object. Will always be 'Error'"
                    )
                    buffer.field("type", "string")
                with buffer.object("id"):
                    generate_description(buffer, "Numeric identifier of the error.")
                    buffer.field("type", "integer")
                    buffer.field("format", "int32")
                with buffer.object("href"):
                    generate_description(buffer, "Self link.")
                    buffer.field("type", "string")
                with buffer.object("code"):
                    generate_description(
                        buffer,
                        "Globally unique code of the error, composed of the unique identifier "
                        "of the API and the numeric identifier of the error. For example, for "
                        "if the numeric identifier of the error is `93` and the identifier of "
                        "the API is `clusters_mgmt` then the code will be `CLUSTERS-MGMT-93`.",
                    )
                    buffer.field("type", "string")
                with buffer.object("reason"):
                    generate_description(buffer, "Human readable description of the error.")
                    buffer.field("type", "string")
                with buffer.object("details"):
                    generate_description(buffer, "Extra information about the error.")
                    buffer.field("type", "object")
                    buffer.field("additionalProperties", True)
