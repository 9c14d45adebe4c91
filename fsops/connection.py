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
import os

from requests.exceptions import ConnectionError

from fsops import client, engine, util
from fsops.core import featurestore_metadata_engine
from fsops.decorators import connected, not_connected


_logger = logging.getLogger(__name__)

AWS_DEFAULT_REGION = "default"
HOPSWORKS_PORT_DEFAULT = 443
SECRETS_STORE_DEFAULT = "parameterstore"
HOSTNAME_VERIFICATION_DEFAULT = True
SUPPORTED_ENGINES = ("spark",)


class Connection:
    """Connection to the Hopsworks project whose feature groups are read.

    Inside Hopsworks (the `REST_ENDPOINT` environment variable is set) the
    connection picks up the project, JWT and key material of the job or
    notebook. Anywhere else it connects to `host` with an API key, and takes
    the key material from the Spark configuration.

    !!! example "External Spark cluster"
        ```python
        import fsops
        conn = fsops.connection(
            'my_instance',                      # Hostname of your Hopsworks instance
            443,                                # Port of your Hopsworks instance
            'my_project',                       # Project owning the feature store
            api_key_file='featurestore.key',    # File containing the API key
            secrets_store='local',
        )
        df = conn.get_feature_store().read_featuregroup('clicks', 1)
        ```

    # Arguments
        host: The hostname of the Hopsworks instance, defaults to `None`.
        port: The port on which the Hopsworks instance can be reached,
            defaults to `443`.
        project: The name of the project to connect to. On Hopsworks this
            defaults to the project the job runs in. Defaults to `None`.
        engine: Which engine to use, only `"spark"` is supported. Defaults to `None`,
            which selects the Spark engine.
        region_name: The AWS region holding the API key secret, defaults to `"default"`.
        secrets_store: Where the API key is stored, `"secretsmanager"`,
            `"parameterstore"` or `"local"`, defaults to `"parameterstore"`.
        hostname_verification: Whether or not to verify Hopsworks' certificate, defaults
            to `True`.
        trust_store_path: Local path of the Hopsworks CA bundle, defaults to `None`.
        api_key_file: Path to a file containing the API Key, read with
            `secrets_store="local"`, defaults to `None`.
        api_key_value: API Key as string, if provided `secrets_store` is ignored,
            defaults to `None`.

    # Returns
        `Connection`. Handle to get feature stores from.
    """

    def __init__(
        self,
        host: str = None,
        port: int = HOPSWORKS_PORT_DEFAULT,
        project: str = None,
        engine: str = None,
        region_name: str = AWS_DEFAULT_REGION,
        secrets_store: str = SECRETS_STORE_DEFAULT,
        hostname_verification: bool = HOSTNAME_VERIFICATION_DEFAULT,
        trust_store_path: str = None,
        api_key_file: str = None,
        api_key_value: str = None,
    ):
        self._host = host
        self._port = port
        self._project = project
        self._engine = engine
        self._external_options = {
            "region_name": region_name,
            "secrets_store": secrets_store,
            "hostname_verification": hostname_verification,
            "trust_store_path": trust_store_path,
            "api_key_file": api_key_file,
            "api_key_value": api_key_value,
        }
        self._metadata_engine = None
        self._connected = False

        self.connect()

    @connected
    def get_feature_store(self, name: str = None):
        """Get the feature store handle of the project, or of a project that shared
        its feature store with it.

        # Arguments
            name: Name of the feature store or of its project, defaults to `None`,
                the feature store of the connected project.

        # Returns
            `FeatureStore`. Handle to read feature groups of the feature store.
        """
        return self._metadata_engine.get_metadata(
            util.default_featurestore(name or None)
        ).featurestore

    @not_connected
    def connect(self):
        """Open the connection: initialise the REST client and the Spark engine.

        Creating a `Connection` object connects it, `connect()` reopens a
        connection after `close()`.
        """
        self._connected = True
        try:
            self._engine = self._select_engine(self._engine)
            if client.base.Client.REST_ENDPOINT in os.environ:
                client.init("hopsworks")
            else:
                client.init(
                    "external",
                    host=self._host,
                    port=self._port,
                    project=self._project,
                    **self._external_options,
                )
            engine.init(self._engine)
            self._metadata_engine = featurestore_metadata_engine.FeaturestoreMetadataEngine()
        except (TypeError, ConnectionError):
            self._connected = False
            raise
        _logger.info("Connected. Call `.close()` to terminate connection gracefully.")

    @staticmethod
    def _select_engine(name):
        if name is None:
            return "spark"
        if name.lower() not in SUPPORTED_ENGINES:
            raise ConnectionError(
                "Engine `{}` is unknown. Supported engines are `'spark'`.".format(name)
            )
        return name.lower()

    def close(self):
        """Close the connection, dropping the cached feature store metadata and
        stopping the client and the engine."""
        if self._connected:
            self._metadata_engine.invalidate()
        client.stop()
        engine.stop()
        self._metadata_engine = None
        self._connected = False
        _logger.info("Connection closed.")

    @classmethod
    def connection(cls, *args, **kwargs):
        """Connection factory method, accessible through `fsops.connection()`."""
        return cls(*args, **kwargs)

    @property
    def host(self):
        return self._host

    @host.setter
    @not_connected
    def host(self, host):
        self._host = host

    @property
    def port(self):
        return self._port

    @port.setter
    @not_connected
    def port(self, port):
        self._port = port

    @property
    def project(self):
        return self._project

    @project.setter
    @not_connected
    def project(self, project):
        self._project = project

    def __enter__(self):
        if not self._connected:
            self.connect()
        return self

    def __exit__(self, type, value, traceback):
        self.close()
