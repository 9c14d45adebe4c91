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

import json
import logging

import boto3
import requests


try:
    from pyspark.sql import SparkSession
except ImportError:
    pass

from fsops.client import auth, base, exceptions


_logger = logging.getLogger(__name__)


class Client(base.Client):
    """Client for Spark clusters outside Hopsworks, e.g. Databricks or EMR.

    The API key is looked up in a secrets store, the TLS key material used by
    the JDBC reads is distributed to the cluster through the Spark configuration.
    """

    DEFAULT_REGION = "default"
    SECRETS_MANAGER = "secretsmanager"
    PARAMETER_STORE = "parameterstore"
    LOCAL_STORE = "local"
    API_KEY_SECRET = "api-key"

    # spark property -> required value, `None` if any value is accepted
    SPARK_SSL_CONF = {
        "spark.hadoop.hops.ssl.trustore.name": None,
        "spark.hadoop.hops.ssl.keystore.name": None,
        "spark.hadoop.hops.ssl.keystores.passwd.name": None,
        "spark.hadoop.hops.ssl.hostname.verifier": "ALLOW_ALL",
        "spark.hadoop.hive.metastore.uris": None,
    }

    def __init__(
        self,
        host,
        port,
        project,
        region_name,
        secrets_store,
        hostname_verification,
        trust_store_path,
        api_key_file,
        api_key_value,
    ):
        if not host:
            raise exceptions.ExternalClientError("host")
        if not project:
            raise exceptions.ExternalClientError("project")

        self._base_url = "https://{}:{}".format(host, port)
        self._project_name = project
        self._region_name = region_name or self.DEFAULT_REGION
        _logger.info(
            "Connecting to %s, project %s", self._base_url, self._project_name
        )

        if api_key_value is None:
            api_key_value = self._get_secret(
                secrets_store, self.API_KEY_SECRET, api_key_file
            )
        self._auth = auth.ApiKeyAuth(api_key_value)
        self._session = requests.session()
        self._verify = self._get_verify(
            "true" if hostname_verification else "false", trust_store_path
        )
        self._connected = True

        self._project_id = str(self._get_project_info(project)["projectId"])
        _logger.debug("Project id: %s", self._project_id)

        self._read_spark_key_material(
            SparkSession.builder.enableHiveSupport().getOrCreate()
        )

    def _read_spark_key_material(self, spark_session):
        """Take the trust/key store paths and their password from the Spark configuration."""
        for key, expected in self.SPARK_SSL_CONF.items():
            value = spark_session.conf.get(key, None)
            if value is None or (expected is not None and value != expected):
                raise exceptions.FeatureStoreException(
                    "Spark is misconfigured for communication with Hopsworks, "
                    "missing or invalid property: " + key
                )

        with open(
            spark_session.conf.get("spark.hadoop.hops.ssl.keystores.passwd.name")
        ) as f:
            self._cert_key = f.read()
        self._trust_store_path = spark_session.conf.get(
            "spark.hadoop.hops.ssl.trustore.name"
        )
        self._key_store_path = spark_session.conf.get(
            "spark.hadoop.hops.ssl.keystore.name"
        )

    def _get_secret(self, secrets_store, secret_key=None, api_key_file=None):
        """Returns secret value from the AWS Secrets Manager or Parameter Store,
        or the first line of `api_key_file` for the local store.

        :raises fsops.client.exceptions.ExternalClientError: `api_key_file` needs to be set for local mode
        :raises fsops.client.exceptions.UnknownSecretStorageError: Provided secrets storage not supported
        """
        _logger.debug("Querying secrets store %s for secret %s", secrets_store, secret_key)
        if secrets_store == self.LOCAL_STORE:
            if not api_key_file:
                raise exceptions.ExternalClientError(
                    "api_key_file needs to be set for local mode"
                )
            with open(api_key_file) as f:
                return f.readline().strip()

        readers = {
            self.SECRETS_MANAGER: self._query_secrets_manager,
            self.PARAMETER_STORE: self._query_parameter_store,
        }
        if secrets_store not in readers:
            raise exceptions.UnknownSecretStorageError(
                "Secrets storage " + str(secrets_store) + " is not supported."
            )
        return readers[secrets_store](secret_key)

    def _boto3_client(self, service_name):
        args = {"service_name": service_name}
        if self._region_name != self.DEFAULT_REGION:
            args["region_name"] = self._region_name
        return boto3.client(**args)

    def _query_secrets_manager(self, secret_key):
        secret_name = "hopsworks/role/" + self._assumed_role()
        response = self._boto3_client("secretsmanager").get_secret_value(
            SecretId=secret_name
        )
        return json.loads(response["SecretString"])[secret_key]

    def _query_parameter_store(self, secret_key):
        name = "/hopsworks/role/" + self._assumed_role() + "/type/" + secret_key
        return self._boto3_client("ssm").get_parameter(Name=name, WithDecryption=True)[
            "Parameter"
        ]["Value"]

    def _assumed_role(self):
        arn = boto3.client("sts").get_caller_identity()["Arn"]
        # arn:aws:sts::123456789012:assumed-role/my-role-name/my-role-session-name
        local_identifier = arn.split(":")[-1].split("/")
        if len(local_identifier) != 3 or local_identifier[0] != "assumed-role":
            raise exceptions.FeatureStoreException(
                "Failed to extract assumed role from arn: " + arn
            )
        return local_identifier[1]

    def _get_project_info(self, project_name):
        """Project metadata, used for the id of the project to connect to."""
        return self._send_request("GET", ["project", "getProjectInfo", project_name])
