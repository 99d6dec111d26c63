"""Azure IoTHub Service Library

This library provides an async service client, builders and associated models for
communicating with the Azure IoTHub service REST API.
"""

from .service import IoTHubService
from .auth import ServiceCredential
from .config import ServiceClientConfig
from .configuration import EdgeModuleBuilder, ModulesContentBuilder
from .twin import TwinPatchBuilder, TwinManager
from .query import QueryBuilder, Query
from .direct_method import DirectMethod
from .models import (
    Status,
    RestartPolicy,
    ImagePullPolicy,
    EdgeModule,
    ModulesContent,
    TwinPatch,
    DeviceTwin,
    ModuleTwin,
    DirectMethodResponse,
    ServiceErrorDetail,
)
from .exceptions import (
    IoTHubServiceError,
    EncodingError,
    SigningError,
    SasTokenError,
    InvalidConnectionString,
    BuilderError,
    MissingFieldError,
    InvalidValueError,
    ServiceError,
    ResponseParsingError,
)
from .constant import VERSION

__version__ = VERSION

__all__ = [
    "IoTHubService",
    "ServiceCredential",
    "ServiceClientConfig",
    "EdgeModuleBuilder",
    "ModulesContentBuilder",
    "TwinPatchBuilder",
    "TwinManager",
    "QueryBuilder",
    "Query",
    "DirectMethod",
    "Status",
    "RestartPolicy",
    "ImagePullPolicy",
    "EdgeModule",
    "ModulesContent",
    "TwinPatch",
    "DeviceTwin",
    "ModuleTwin",
    "DirectMethodResponse",
    "ServiceErrorDetail",
    "IoTHubServiceError",
    "EncodingError",
    "SigningError",
    "SasTokenError",
    "InvalidConnectionString",
    "BuilderError",
    "MissingFieldError",
    "InvalidValueError",
    "ServiceError",
    "ResponseParsingError",
]
