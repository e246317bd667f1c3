"""Generation of the OpenAPI operation of each method."""

from metamodel_openapi.binding import BindingCalculator
from metamodel_openapi.buffer import Buffer
from metamodel_openapi.generator.schemas import (
    ERROR_SCHEMA,
    SCHEMAS_PREFIX,
    SchemaReferenceResolver,
    generate_description,
)
from metamodel_openapi.model.concepts import Locator, Method, Parameter, Path
from metamodel_openapi.names import NamesCalculator

JSON_CONTENT = "application/json"


class OperationBinder:
    """Writes one operation: parameters, request body and responses."""

    def __init__(
        self,
        names: NamesCalculator,
        binding: BindingCalculator,
        resolver: SchemaReferenceResolver,
    ):
        self.names = names
        self.binding = binding
        self.resolver = resolver

    def generate(self, buffer: Buffer, path: Path, method: Method) -> None:
        with buffer.object(self.binding.method(method).lower()):
            generate_description(buffer, method.doc)
            self._generate_parameters(buffer, path, method)
            body_parameters = self.binding.request_body_parameters(method)
            if body_parameters:
                self._generate_request_body(buffer, body_parameters[0])
            self._generate_responses(buffer, method)

    def _generate_parameters(self, buffer: Buffer, path: Path, method: Method) -> None:
        with buffer.array("parameters"):
            for locator in path.locators:
                if locator.variable:
                    self._generate_path_parameter(buffer, locator)
            for parameter in self.binding.request_query_parameters(method):
                self._generate_query_parameter(buffer, parameter)

    def _generate_path_parameter(self, buffer: Buffer, locator: Locator) -> None:
        with buffer.object():
            buffer.field("name", self.binding.locator_segment(locator) + "_id")
            buffer.field("in", "path")
            with buffer.object("schema"):
                buffer.field("type", "string")

    def _generate_query_parameter(self, buffer: Buffer, parameter: Parameter) -> None:
        with buffer.object():
            buffer.field("name", self.binding.parameter_name(parameter))
            generate_description(buffer, parameter.doc)
            buffer.field("in", "query")
            with buffer.object("schema"):
                self.resolver.generate(buffer, parameter.type)

    def _generate_request_body(self, buffer: Buffer, parameter: Parameter) -> None:
        with buffer.object("requestBody"):
            with buffer.object("content"):
                with buffer.object(JSON_CONTENT):
                    with buffer.object("schema"):
                        self.resolver.generate(buffer, parameter.type)

    def _generate_responses(self, buffer: Buffer, method: Method) -> None:
        with buffer.object("responses"):
            with buffer.object(self.binding.default_status(method)):
                generate_description(buffer, "Success.")
                parameters = self.binding.response_parameters(method)
                if parameters:
                    with buffer.object("content"):
                        with buffer.object(JSON_CONTENT):
                            with buffer.object("schema"):
                                self._generate_response_schema(buffer, parameters)
            with buffer.object("default"):
                generate_description(buffer, "Error.")
                with buffer.object("content"):
                    with buffer.object(JSON_CONTENT):
                        with buffer.object("schema"):
                            buffer.field("$ref", SCHEMAS_PREFIX + ERROR_SCHEMA)

    def _generate_response_schema(self, buffer: Buffer, parameters: list[Parameter]) -> None:
        # A single parameter is the whole response body, several are its properties
        if len(parameters) == 1:
            self.resolver.generate(buffer, parameters[0].type)
            return
        buffer.field("type", "object")
        with buffer.object("properties"):
            for parameter in parameters:
                with buffer.object(self.names.parameter_property_name(parameter)):
                    generate_description(buffer, parameter.doc)
                    self.resolver.generate(buffer, parameter.type)
