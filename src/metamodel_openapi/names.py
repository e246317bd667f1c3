"""Calculate the names used in OpenAPI documents for model concepts.

Model names may be written in snake_case, PascalCase or camelCase; they are
split into words and joined again in the style each OpenAPI element uses:

  Type 'cluster_state'        -> schema 'ClusterState'
  Type 'ClusterState'         -> schema 'ClusterState'
  Attribute 'creationTimestamp' -> property 'creation_timestamp'
"""

import re

from metamodel_openapi.model.concepts import Attribute, Parameter, Type


def split_words(name: str) -> list[str]:
    """Split a name into its words, keeping acronyms together."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    s2 = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1)
    return [w for w in re.split(r"[_\-\s]+", s2) if w]


def to_pascal(name: str) -> str:
    return "".join(w[:1].upper() + w[1:] for w in split_words(name))


def to_snake(name: str) -> str:
    return "_".join(w.lower() for w in split_words(name))


class NamesCalculator:
    """Names of schemas and properties in generated OpenAPI documents."""

    def schema_name(self, typ: Type) -> str:
        return to_pascal(typ.name)

    def attribute_property_name(self, attribute: Attribute) -> str:
        return to_snake(attribute.name)

    def parameter_property_name(self, parameter: Parameter) -> str:
        return to_snake(parameter.name)
