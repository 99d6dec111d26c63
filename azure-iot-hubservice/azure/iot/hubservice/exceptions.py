# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define Azure IoT Hub Service exceptions to be shared across modules"""


class IoTHubServiceError(Exception):
    """Base class for all failures raised by this library"""

    pass


# Auth Exceptions
class EncodingError(IoTHubServiceError):
    """Represents a private key that is not valid base64"""

    pass


class SigningError(IoTHubServiceError):
    """Represents a failure to sign data with a private key"""

    pass


class SasTokenError(IoTHubServiceError):
    """Represents a malformed SAS token string"""

    pass


class InvalidConnectionString(IoTHubServiceError, ValueError):
    """Represents a connection string that is malformed or missing required fields"""

    pass


# Builder Exceptions
class BuilderError(IoTHubServiceError):
    """Represents a failure to build an object from the values given to a builder

    :ivar str field_name: The name of the field that caused the failure
    """

    def __init__(self, message, field_name):
        super().__init__(message)
        self.field_name = field_name


class MissingFieldError(BuilderError):
    """A required field was not set on a builder"""

    def __init__(self, field_name):
        super().__init__("missing field {}".format(field_name), field_name)


class InvalidValueError(BuilderError):
    """A field was set on a builder with a value that cannot be used"""

    def __init__(self, field_name):
        super().__init__("incorrect value for {}".format(field_name), field_name)


# Service Exceptions
class ServiceError(IoTHubServiceError):
    """Represents a failure response reported by IoT Hub

    :ivar int status: The HTTP status code of the response
    :ivar str reason: The HTTP reason phrase of the response
    :ivar str body: The raw body of the response
    :ivar detail: The structured error reported by IoT Hub, if the body could be parsed as one
    :type detail: :class:`azure.iot.hubservice.models.ServiceErrorDetail` or None
    """

    def __init__(self, message, status, reason=None, body=None, detail=None):
        super().__init__(message)
        self.status = status
        self.reason = reason
        self.body = body
        self.detail = detail


class ResponseParsingError(IoTHubServiceError):
    """Represents a success response whose body did not match the expected schema

    :ivar str body: The raw body of the response
    """

    def __init__(self, message, body):
        super().__init__(message)
        self.body = body
