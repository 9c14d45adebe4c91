#
#   Copyright 2020 Logical Clocks AB
#
#   Licensed under the Apache License, Version 2.0 (the "License");
#   you may not use this file except in compliance with the License.
#   You may obtain a copy of the License at
#
#       http://www.apache.org/licenses/LICENSE-2.0
#
#   Unless required by applicable law or agreed to in writing, software
#   distributed under the License is distributed on an "AS IS" BASIS,
#   WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#   See the License for the specific language governing permissions and
#   limitations under the License.
#
from __future__ import annotations

import requests


class RestAPIError(Exception):
    """REST Exception encapsulating the response object and url."""

    NOT_FOUND = 404

    def __init__(self, url: str, response: requests.Response) -> None:
        try:
            error_object = response.json()
            if isinstance(error_object, str):
                error_object = {"errorMsg": error_object}
        except Exception:
            error_object = {}
        message = (
            "Metadata operation error: (url: {}). Server response: \n"
            "HTTP code: {}, HTTP reason: {}, body: {}, error code: {}, error msg: {}, user "
            "msg: {}".format(
                url,
                response.status_code,
                response.reason,
                response.content,
                error_object.get("errorCode", ""),
                error_object.get("errorMsg", ""),
                error_object.get("usrMsg", ""),
            )
        )
        super().__init__(message)
        self.url = url
        self.response = response

    @property
    def status_code(self) -> int:
        return self.response.status_code


class UnknownSecretStorageError(Exception):
    """This exception will be raised if an unused secrets storage is passed as a parameter."""


class FeatureStoreException(Exception):
    """Generic feature store exception"""


class FeaturestoreNotFound(FeatureStoreException):
    """Raised when the requested feature store does not exist or is not shared with the project."""


class FeatureGroupNotFoundError(FeatureStoreException):
    """Raised when no feature group with the requested name and version exists in the feature store."""

    def __init__(
        self, name: str, version: int, available_versions: list = None
    ) -> None:
        message = "Could not find the requested feature group `{}` with version `{}`".format(
            name, version
        )
        if available_versions:
            message += ", available versions are {}".format(available_versions)
        super().__init__(message)
        self.name = name
        self.version = version


class StorageConnectorNotFoundError(FeatureStoreException):
    """Raised when no storage connector with the requested name exists in the feature store."""

    def __init__(self, name: str) -> None:
        super().__init__(
            "Could not find the requested storage connector `{}`".format(name)
        )
        self.name = name


class HiveNotEnabledError(FeatureStoreException):
    """Raised when the Spark session was created without Hive support."""

    def __init__(self) -> None:
        super().__init__(
            "Hive is not enabled for the Spark session. Create the session with "
            "`SparkSession.builder.enableHiveSupport()` to read from the feature store."
        )


class OnlineFeaturestoreNotEnabledError(FeatureStoreException):
    """Raised when the online feature store is requested but not enabled for the project."""


class OnlineFeaturestoreUserNotFoundError(FeatureStoreException):
    """Raised when the online feature store connector does not carry a database user."""


class OnlineFeaturestorePasswordNotFoundError(FeatureStoreException):
    """Raised when the online feature store connector does not carry a database password."""


class FeaturestoreMetadataError(FeatureStoreException):
    """Raised when the feature store metadata returned by Hopsworks cannot be parsed."""


class UnsupportedOperationError(FeatureStoreException, NotImplementedError):
    """Raised when an operation is called on an object that does not support it."""


class ExternalClientError(TypeError):
    """Raised when external client cannot be initialized due to missing arguments."""

    def __init__(self, missing_argument: str) -> None:
        message = (
            "{0} cannot be of type NoneType, {0} is a non-optional "
            "argument to connect to hopsworks from an external environment."
        ).format(missing_argument)
        super().__init__(message)
