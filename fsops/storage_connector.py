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

import logging
import warnings
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import humps
from fsops import client, util


_logger = logging.getLogger(__name__)


class StorageConnector(ABC):
    HOPSFS = "HOPSFS"
    S3 = "S3"
    JDBC = "JDBC"

    def __init__(
        self,
        id: Optional[int],
        name: str,
        description: Optional[str],
        featurestore_id: Optional[int],
        **kwargs,
    ) -> None:
        self._id = id
        self._name = name
        self._description = description
        self._featurestore_id = featurestore_id

    @classmethod
    def from_response_json(
        cls, json_dict: Dict[str, Any]
    ) -> Union["JdbcConnector", "HopsFSConnector", "S3Connector"]:
        json_decamelized = humps.decamelize(json_dict)
        _ = json_decamelized.pop("type", None)
        for subcls in cls.__subclasses__():
            if subcls.type == json_decamelized["storage_connector_type"]:
                _ = json_decamelized.pop("storage_connector_type")
                return subcls(**json_decamelized)
        raise ValueError(
            "Storage connector type `{}` is not supported.".format(
                json_decamelized["storage_connector_type"]
            )
        )

    @property
    def id(self) -> Optional[int]:
        """Id of the storage connector uniquely identifying it in the Feature store."""
        return self._id

    @property
    def name(self) -> str:
        """Name of the storage connector."""
        return self._name

    @property
    def description(self) -> Optional[str]:
        """User provided description of the storage connector."""
        return self._description

    @abstractmethod
    def spark_options(self) -> Dict[str, Any]:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._name!r})"


class HopsFSConnector(StorageConnector):
    type = StorageConnector.HOPSFS

    def __init__(
        self,
        id: Optional[int],
        name: str,
        featurestore_id: Optional[int] = None,
        description: Optional[str] = None,
        # members specific to type of connector
        hopsfs_path: Optional[str] = None,
        dataset_name: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(id, name, description, featurestore_id)

        self._hopsfs_path = hopsfs_path
        self._dataset_name = dataset_name

    @property
    def hopsfs_path(self) -> Optional[str]:
        """Full HopsFS path of the dataset the connector points to."""
        return self._hopsfs_path

    @property
    def dataset_name(self) -> Optional[str]:
        return self._dataset_name

    def spark_options(self) -> Dict[str, Any]:
        """Return prepared options to be passed to Spark, based on the additional
        arguments.
        """
        return {}


class S3Connector(StorageConnector):
    type = StorageConnector.S3

    def __init__(
        self,
        id: Optional[int],
        name: str,
        featurestore_id: Optional[int] = None,
        description: Optional[str] = None,
        # members specific to type of connector
        bucket: Optional[str] = None,
        iam_role: Optional[str] = None,
        arguments: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> None:
        super().__init__(id, name, description, featurestore_id)

        self._bucket = bucket
        self._iam_role = iam_role
        self._arguments = (
            {arg["name"]: arg.get("value", None) for arg in arguments}
            if isinstance(arguments, list)
            else (arguments or {})
        )

    @property
    def bucket(self) -> Optional[str]:
        """Return the bucket for S3 connectors."""
        return self._bucket

    @property
    def iam_role(self) -> Optional[str]:
        """IAM role."""
        return self._iam_role

    @property
    def arguments(self) -> Dict[str, Any]:
        """Additional spark options for the S3 connector, passed as a dictionary."""
        return self._arguments

    def spark_options(self) -> Dict[str, Any]:
        """Return prepared options to be passed to Spark, based on the additional
        arguments.
        """
        return dict(self._arguments)


class JdbcConnector(StorageConnector):
    type = StorageConnector.JDBC
    JDBC_FORMAT = "jdbc"

    # arguments resolved from the client key material when no value is provided
    JDBC_TRUSTSTORE_ARG = "sslTrustStore"
    JDBC_TRUSTSTORE_PW_ARG = "trustStorePassword"
    JDBC_KEYSTORE_ARG = "sslKeyStore"
    JDBC_KEYSTORE_PW_ARG = "keyStorePassword"

    def __init__(
        self,
        id: Optional[int],
        name: str,
        featurestore_id: Optional[int] = None,
        description: Optional[str] = None,
        # members specific to type of connector
        connection_string: Optional[str] = None,
        arguments: Optional[Union[str, List[Dict[str, Any]], Dict[str, Any]]] = None,
        **kwargs,
    ) -> None:
        super().__init__(id, name, description, featurestore_id)

        # JDBC
        self._connection_string = connection_string
        self._arguments = self._parse_arguments(arguments)

    @staticmethod
    def _parse_arguments(
        arguments: Optional[Union[str, List[Dict[str, Any]], Dict[str, Any]]],
    ) -> List[Tuple[str, Optional[str]]]:
        """Normalize the connector arguments into an ordered list of (name, value) pairs.

        Hopsworks returns either a comma separated string of `name=value` pairs or
        bare names, whose values are resolved at read time, or a list of
        `{"name": ..., "value": ...}` objects.
        """
        if not arguments:
            return []
        if isinstance(arguments, str):
            parsed = []
            for arg in arguments.split(","):
                name, sep, value = arg.strip().partition("=")
                if name:
                    parsed.append((name, value if sep else None))
            return parsed
        if isinstance(arguments, dict):
            return list(arguments.items())
        return [(arg["name"], arg.get("value", None)) for arg in arguments]

    @property
    def connection_string(self) -> Optional[str]:
        """JDBC connection string."""
        return self._connection_string

    @property
    def arguments(self) -> Dict[str, Optional[str]]:
        """Additional JDBC arguments. Arguments returned by name only have the value `None`
        and are resolved when the connection url is built."""
        return dict(self._arguments)

    def spark_options(self) -> Dict[str, Any]:
        """Return prepared options to be passed to Spark, based on the additional
        arguments.
        """
        options = {name: value for name, value in self._arguments if value is not None}

        options["url"] = self._connection_string

        return options

    def connection_url(self, jdbc_arguments: Optional[Mapping[str, Any]] = None) -> str:
        """Build the JDBC connection url by appending every connector argument as
        `name=value;` to the connection string.

        Values provided through `jdbc_arguments` take precedence over the values
        stored with the connector. The TLS arguments (`sslTrustStore`,
        `trustStorePassword`, `sslKeyStore`, `keyStorePassword`) fall back to the
        key material of the connected client.

        # Arguments
            jdbc_arguments: Mapping of argument name to value to substitute in the
                connection string, defaults to `None`.

        # Returns
            `str`. The JDBC connection url.
        """
        jdbc_arguments = jdbc_arguments or {}
        url = self._connection_string or ""
        for name, value in self._arguments:
            if name in jdbc_arguments:
                value = jdbc_arguments[name]
            elif value is None:
                value = self._client_tls_argument(name)

            if value is None:
                warnings.warn(
                    "No value found for JDBC argument `{}` of storage connector `{}`, "
                    "it is left out of the connection string.".format(name, self._name),
                    util.StorageWarning,
                    stacklevel=2,
                )
                continue
            url += "{}={};".format(name, value)
        _logger.debug("Built JDBC connection url for storage connector %s", self._name)
        return url

    def _client_tls_argument(self, name: str) -> Optional[str]:
        if name not in (
            self.JDBC_TRUSTSTORE_ARG,
            self.JDBC_TRUSTSTORE_PW_ARG,
            self.JDBC_KEYSTORE_ARG,
            self.JDBC_KEYSTORE_PW_ARG,
        ):
            return None
        _client = client.get_instance()
        if name == self.JDBC_TRUSTSTORE_ARG:
            return _client._get_jks_trust_store_path()
        if name == self.JDBC_KEYSTORE_ARG:
            return _client._get_jks_key_store_path()
        return _client._cert_key
