"""Generation of the `paths` section: absolute URLs and their operations."""

from metamodel_openapi.binding import BindingCalculator
from metamodel_openapi.buffer import Buffer
from metamodel_openapi.generator.operations import OperationBinder
from metamodel_openapi.model.concepts import Path, Service, Version
from metamodel_openapi.names import to_snake


def absolute_path(
    binding: BindingCalculator, service: Service, version: Version, path: Path
) -> str:
    """Return the URL template of a path, like '/api/clusters_mgmt/v1/clusters/{cluster_id}'."""
    segments = []
    for locator in path.locators:
        segment = binding.locator_segment(locator)
        if locator.variable:
            segment = f"{{{segment}_id}}"
        segments.append(segment)
    return f"/api/{to_snake(service.name)}/{to_snake(version.name)}/" + "/".join(segments)


def index_paths(
    binding: BindingCalculator, service: Service, version: Version
) -> dict[str, Path]:
    """Index the paths of a version by absolute URL, sorted by URL.

    When several paths have the same URL the first one is kept.
    """
    index: dict[str, Path] = {}
    for path in version.paths:
        index.setdefault(absolute_path(binding, service, version, path), path)
    return {absolute: index[absolute] for absolute in sorted(index)}


class PathAssembler:
    def __init__(self, binding: BindingCalculator, operations: OperationBinder):
        self.binding = binding
        self.operations = operations

    def generate(self, buffer: Buffer, service: Service, version: Version) -> None:
        with buffer.object("paths"):
            for absolute, path in index_paths(self.binding, service, version).items():
                with buffer.object(absolute):
                    for method in path.resource.methods:
                        self.operations.generate(buffer, path, method)
