"""Model description loader.

Reads a YAML (or JSON) description of services, versions, types and
resources into the model concepts. Type references use the built-in names
(Boolean, Integer, Long, Float, String, Date), the names of declared types,
'[]T' for lists of T and '[String]T' for maps from strings to T.
"""

import re
from pathlib import Path as FilePath
from typing import Any

import yaml

from metamodel_openapi.errors import ModelError
from metamodel_openapi.model.concepts import (
    Attribute,
    EnumValue,
    Locator,
    Method,
    Model,
    Parameter,
    Path,
    Resource,
    Service,
    Type,
    TypeKind,
    Version,
)

BUILTIN_TYPES: dict[str, TypeKind] = {
    "Boolean": TypeKind.BOOLEAN,
    "Integer": TypeKind.INTEGER,
    "Long": TypeKind.LONG,
    "Float": TypeKind.FLOAT,
    "String": TypeKind.STRING,
    "Date": TypeKind.DATE,
}

_DECLARED_KINDS = {"enum", "struct", "class"}

_MAP_PATTERN = re.compile(r"^\[(\w+)\](.+)$")


def load_model(file_path: FilePath) -> Model:
    """Load a model description file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ModelError(f"can't parse model file '{file_path}': {e}") from e
    return parse_model(doc)


def parse_model(doc: Any) -> Model:
    """Build a model from an already parsed description."""
    if not isinstance(doc, dict):
        raise ModelError("model description must be a mapping")
    services = [_parse_service(s) for s in doc.get("services") or []]
    return Model(services=services)


class TypeTable:
    """Types visible inside one version, including interned list and map types."""

    def __init__(self, version: str):
        self.version = version
        self._types: dict[str, Type] = {
            name: Type(name=name, kind=kind) for name, kind in BUILTIN_TYPES.items()
        }
        self._builtin_names = {name.lower(): name for name in BUILTIN_TYPES}

    def declare(self, data: dict) -> Type:
        name = _require(data, "name", "type")
        kind = str(data.get("kind", "struct")).lower()
        if kind not in _DECLARED_KINDS:
            raise ModelError(f"type '{name}' of version '{self.version}' has unknown kind '{kind}'")
        if name in self._types or name.lower() in self._builtin_names:
            raise ModelError(f"type '{name}' of version '{self.version}' is already defined")

        if kind == "enum":
            typ = Type(
                name=name,
                kind=TypeKind.ENUM,
                doc=data.get("doc") or "",
                values=[_parse_enum_value(v) for v in data.get("values") or []],
            )
        else:
            typ = Type(
                name=name,
                kind=TypeKind.STRUCT,
                doc=data.get("doc") or "",
                is_class=kind == "class",
            )
        self._types[name] = typ
        return typ

    def resolve(self, ref: str) -> Type:
        ref = str(ref).strip()
        if ref.lower() in self._builtin_names:
            ref = self._builtin_names[ref.lower()]
        if ref in self._types:
            return self._types[ref]

        if ref.startswith("[]"):
            typ = Type(name=ref, kind=TypeKind.LIST, element=self.resolve(ref[2:]))
        else:
            match = _MAP_PATTERN.match(ref)
            if match is None:
                raise ModelError(f"type '{ref}' isn't defined in version '{self.version}'")
            key = self.resolve(match.group(1))
            if key.kind != TypeKind.STRING:
                raise ModelError(f"map type '{ref}' must have string keys")
            typ = Type(name=ref, kind=TypeKind.MAP, element=self.resolve(match.group(2)))
        self._types[ref] = typ
        return typ


def _require(data: Any, key: str, what: str) -> str:
    if not isinstance(data, dict) or data.get(key) in (None, ""):
        raise ModelError(f"{what} without '{key}': {data!r}")
    return str(data[key])


def _parse_service(data: dict) -> Service:
    name = _require(data, "name", "service")
    versions = [_parse_version(v) for v in data.get("versions") or []]
    return Service(name=name, doc=data.get("doc") or "", versions=versions)


def _parse_version(data: dict) -> Version:
    name = _require(data, "name", "version")
    types = TypeTable(name)

    # Declare every type before resolving attributes so they can refer to each other
    declared = [(t, types.declare(t)) for t in data.get("types") or []]
    for type_data, typ in declared:
        if typ.is_struct:
            typ.attributes = [
                _parse_attribute(a, types) for a in type_data.get("attributes") or []
            ]

    resources = _parse_resources(data.get("resources") or [], types, name)
    root_name = str(data.get("root", "Root"))
    root = resources.get(root_name)
    if root is None and resources:
        raise ModelError(f"version '{name}' has no root resource '{root_name}'")

    paths: list[Path] = []
    if root is not None:
        _collect_paths(root, [], {id(root)}, paths)

    return Version(
        name=name,
        doc=data.get("doc") or "",
        root=root_name,
        types=[typ for _, typ in declared],
        resources=list(resources.values()),
        paths=paths,
    )


def _parse_enum_value(data: Any) -> EnumValue:
    if isinstance(data, dict):
        return EnumValue(name=_require(data, "name", "enum value"), doc=data.get("doc") or "")
    return EnumValue(name=str(data))


def _parse_attribute(data: dict, types: TypeTable) -> Attribute:
    return Attribute(
        name=_require(data, "name", "attribute"),
        type=types.resolve(_require(data, "type", "attribute")),
        doc=data.get("doc") or "",
    )


def _parse_parameter(data: dict, types: TypeTable) -> Parameter:
    return Parameter(
        name=_require(data, "name", "parameter"),
        type=types.resolve(_require(data, "type", "parameter")),
        doc=data.get("doc") or "",
        is_in=bool(data.get("in", False)),
        is_out=bool(data.get("out", False)),
    )


def _parse_method(data: dict, types: TypeTable) -> Method:
    return Method(
        name=_require(data, "name", "method"),
        doc=data.get("doc") or "",
        parameters=[_parse_parameter(p, types) for p in data.get("parameters") or []],
    )


def _parse_resources(items: list[dict], types: TypeTable, version: str) -> dict[str, Resource]:
    resources: dict[str, Resource] = {}
    for data in items:
        name = _require(data, "name", "resource")
        if name in resources:
            raise ModelError(f"resource '{name}' of version '{version}' is already defined")
        resources[name] = Resource(
            name=name,
            doc=data.get("doc") or "",
            methods=[_parse_method(m, types) for m in data.get("methods") or []],
        )

    # Locators are attached once all the resources exist, as they can point anywhere
    for data in items:
        resource = resources[str(data["name"])]
        locators = []
        for locator in data.get("locators") or []:
            target_name = _require(locator, "target", "locator")
            target = resources.get(target_name)
            if target is None:
                raise ModelError(
                    f"locator '{locator.get('name')}' of resource '{resource.name}' "
                    f"points to unknown resource '{target_name}'"
                )
            locators.append(
                Locator(
                    name=_require(locator, "name", "locator"),
                    target=target,
                    doc=locator.get("doc") or "",
                    variable=bool(locator.get("variable", False)),
                )
            )
        resource.locators = locators
    return resources


def _collect_paths(
    resource: Resource, prefix: list[Locator], visiting: set[int], paths: list[Path]
) -> None:
    """Recursively collect the paths reachable from a resource, depth first."""
    for locator in resource.locators:
        target = locator.target
        if id(target) in visiting:
            continue
        current = prefix + [locator]
        paths.append(Path(locators=current))
        _collect_paths(target, current, visiting | {id(target)}, paths)
