"""Calculate where the document of each service version is written."""

from metamodel_openapi.model.concepts import Service, Version
from metamodel_openapi.names import to_snake


class PackagesCalculator:
    def version_package(self, service: Service, version: Version) -> str:
        """Relative directory of a version, for example 'clusters_mgmt/v1'."""
        return f"{to_snake(service.name)}/{to_snake(version.name)}"
