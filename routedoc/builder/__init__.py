"""
Route descriptor consumption.

- ParamLocationResolver: path/query/header/body/formData placement
- ParamSchemaBuilder: parameter type plus documentation -> schema
- RequestBuilder / ResponseBuilder: operation parameters, body and responses
- ApiModelBuilder: routes -> ApiDocument, with namespace filtering
"""

from .api_model_builder import ApiModelBuilder, in_namespace, normalize_path
from .param_location_resolver import ParamLocationResolver
from .param_schema_builder import ParamSchemaBuilder
from .request_builder import RequestBuilder
from .response_builder import ResponseBuilder

__all__ = [
    "ApiModelBuilder",
    "ParamLocationResolver",
    "ParamSchemaBuilder",
    "RequestBuilder",
    "ResponseBuilder",
    "in_namespace",
    "normalize_path",
]
