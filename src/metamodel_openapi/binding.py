"""HTTP binding rules: verbs, status codes and parameter placement.

  Add    -> POST   201   body: inbound struct/list/map parameters
  Delete -> DELETE 204
  Get    -> GET    200
  List   -> GET    200
  Update -> PATCH  200   body: inbound struct/list/map parameters
  Post   -> POST   200   body: inbound struct/list/map parameters
  other  -> POST   200   (actions)

Query parameters are the inbound parameters of primitive or enum type,
response parameters are the outbound ones.
"""

from metamodel_openapi.model.concepts import EnumValue, Locator, Method, Parameter
from metamodel_openapi.names import to_snake

_METHOD_VERBS: dict[str, str] = {
    "add": "POST",
    "delete": "DELETE",
    "get": "GET",
    "list": "GET",
    "update": "PATCH",
    "post": "POST",
}

_DEFAULT_STATUSES: dict[str, str] = {
    "add": "201",
    "delete": "204",
}

# Verbs that never carry a request body
_BODILESS_VERBS = {"GET", "DELETE"}


class BindingCalculator:
    """Decides how model methods and parameters map onto HTTP requests."""

    def method(self, method: Method) -> str:
        return _METHOD_VERBS.get(to_snake(method.name), "POST")

    def default_status(self, method: Method) -> str:
        return _DEFAULT_STATUSES.get(to_snake(method.name), "200")

    def request_query_parameters(self, method: Method) -> list[Parameter]:
        return [
            p for p in method.parameters
            if p.is_in and (p.type.is_primitive or p.type.is_enum)
        ]

    def request_body_parameters(self, method: Method) -> list[Parameter]:
        """Inbound parameters sent in the request body, in model order.

        Only the first one ends up in the generated document.
        """
        if self.method(method) in _BODILESS_VERBS:
            return []
        return [
            p for p in method.parameters
            if p.is_in and (p.type.is_struct or p.type.is_list or p.type.is_map)
        ]

    def response_parameters(self, method: Method) -> list[Parameter]:
        return [p for p in method.parameters if p.is_out]

    def locator_segment(self, locator: Locator) -> str:
        return to_snake(locator.name)

    def parameter_name(self, parameter: Parameter) -> str:
        return to_snake(parameter.name)

    def enum_value_name(self, value: EnumValue) -> str:
        return to_snake(value.name)
