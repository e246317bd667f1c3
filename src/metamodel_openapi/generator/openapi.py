"""OpenAPI 3.0 document generator.

Writes one document for each version of each service of the model.
"""

from pathlib import Path

from metamodel_openapi.binding import BindingCalculator
from metamodel_openapi.buffer import FORMATS, Buffer
from metamodel_openapi.errors import ConfigurationError, GenerationError
from metamodel_openapi.generator.operations import OperationBinder
from metamodel_openapi.generator.paths import PathAssembler
from metamodel_openapi.generator.schemas import SchemaReferenceResolver, TypeSchemaEmitter
from metamodel_openapi.model.concepts import Model, Service, Version
from metamodel_openapi.names import NamesCalculator, to_snake
from metamodel_openapi.packages import PackagesCalculator
from metamodel_openapi.reporter import Reporter

OPENAPI_VERSION = "3.0.0"

LICENSE = {"name": "Apache 2.0", "url": "http://www.apache.org/licenses/LICENSE-2.0"}
CONTACT = {"name": "OCM Feedback", "email": "ocm-feedback@redhat.com"}
SERVER = {"description": "Production", "url": "https://api.openshift.com"}


class OpenApiGenerator:
    """Generates the OpenAPI documents of a model.

    All the collaborators are mandatory; a missing one is rejected when the
    generator is created, before anything is generated.
    """

    def __init__(
        self,
        reporter: Reporter | None = None,
        model: Model | None = None,
        output: Path | str | None = None,
        names: NamesCalculator | None = None,
        binding: BindingCalculator | None = None,
        packages: PackagesCalculator | None = None,
        fmt: str = "json",
    ):
        if reporter is None:
            raise ConfigurationError("reporter is mandatory")
        if model is None:
            raise ConfigurationError("model is mandatory")
        if not output:
            raise ConfigurationError("output directory is mandatory")
        if names is None:
            raise ConfigurationError("names calculator is mandatory")
        if binding is None:
            raise ConfigurationError("binding calculator is mandatory")
        if packages is None:
            raise ConfigurationError("packages calculator is mandatory")
        if fmt not in FORMATS:
            raise ConfigurationError(f"unsupported output format '{fmt}'")

        self.reporter = reporter
        self.model = model
        self.output = Path(output)
        self.names = names
        self.binding = binding
        self.packages = packages
        self.fmt = fmt

        self.resolver = SchemaReferenceResolver(names, reporter)
        self.schemas = TypeSchemaEmitter(names, binding, self.resolver)
        self.operations = OperationBinder(names, binding, self.resolver)
        self.paths = PathAssembler(binding, self.operations)

    def run(self) -> list[Path]:
        """Write the document of every version and return the written files.

        Errors writing a document stop the run immediately. Errors reported
        while generating are counted and raised together at the end.
        """
        errors_before = self.reporter.errors
        written = []
        for service in self.model.services:
            for version in service.versions:
                written.append(self.generate_spec(service, version))

        errors = self.reporter.errors - errors_before
        if errors > 0:
            raise GenerationError(errors)
        return written

    def generate_spec(self, service: Service, version: Version) -> Path:
        buffer = Buffer(
            output=self.output,
            package=self.packages.version_package(service, version),
            fmt=self.fmt,
            reporter=self.reporter,
        )
        self.generate_spec_source(buffer, service, version)
        return buffer.write()

    def generate_spec_source(self, buffer: Buffer, service: Service, version: Version) -> None:
        with buffer.object():
            buffer.field("openapi", OPENAPI_VERSION)
            self._generate_info(buffer, service, version)
            self._generate_servers(buffer)
            self.paths.generate(buffer, service, version)
            self._generate_components(buffer, version)
            self._generate_security(buffer)

    def _generate_info(self, buffer: Buffer, service: Service, version: Version) -> None:
        with buffer.object("info"):
            buffer.field("version", to_snake(version.name))
            buffer.field("title", to_snake(service.name))
            with buffer.object("license"):
                for key, value in LICENSE.items():
                    buffer.field(key, value)
            with buffer.object("contact"):
                for key, value in CONTACT.items():
                    buffer.field(key, value)

    def _generate_servers(self, buffer: Buffer) -> None:
        with buffer.array("servers"):
            with buffer.object():
                for key, value in SERVER.items():
                    buffer.field(key, value)

    def _generate_components(self, buffer: Buffer, version: Version) -> None:
        with buffer.object("components"):
            with buffer.object("schemas"):
                self.schemas.generate(buffer, version)

    def _generate_security(self, buffer: Buffer) -> None:
        with buffer.array("security"):
            with buffer.object():
                with buffer.array("bearer"):
                    pass
