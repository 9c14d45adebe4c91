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
import base64
import os
import textwrap
from pathlib import Path

import requests

from fsops.client import auth, base

try:
    import jks
except ImportError:
    pass


class Client(base.Client):
    """Client for jobs and notebooks running inside a Hopsworks project.

    Everything is read from the container: the REST endpoint and project from
    the environment, the JWT or API key from `SECRETS_DIR` and the key material
    from the working directory or `MATERIAL_DIRECTORY`.
    """

    REQUESTS_VERIFY = "REQUESTS_VERIFY"
    PROJECT_ID = "HOPSWORKS_PROJECT_ID"
    PROJECT_NAME = "HOPSWORKS_PROJECT_NAME"
    HADOOP_USER_NAME = "HADOOP_USER_NAME"
    HDFS_USER = "HDFS_USER"
    MATERIAL_DIRECTORY = "MATERIAL_DIRECTORY"
    SECRETS_DIR = "SECRETS_DIR"

    # local file name, suffix of the user's file in the material directory
    TRUST_STORE = ("t_certificate", "__tstore.jks")
    KEY_STORE = ("k_certificate", "__kstore.jks")
    CERT_KEY = ("material_passwd", "__cert.key")
    PEM_CA_CHAIN = "ca_chain.pem"

    def __init__(self):
        self._base_url = os.environ[self.REST_ENDPOINT]
        self._secrets_dir = os.environ.get(self.SECRETS_DIR, "")
        self._project_id = os.environ[self.PROJECT_ID]
        self._project_name = (
            os.environ.get(self.PROJECT_NAME) or self._project_user().split("__")[0]
        )

        with open(self._material_path(self.CERT_KEY)) as f:
            self._cert_key = f.read()
        self._trust_store_path = self._material_path(self.TRUST_STORE)
        self._key_store_path = self._material_path(self.KEY_STORE)

        try:
            self._auth = auth.BearerAuth(self._read_jwt())
        except FileNotFoundError:
            self._auth = auth.ApiKeyAuth(self._read_apikey())
        self._verify = self._get_verify(
            os.environ.get(self.REQUESTS_VERIFY, "true"), self._get_ca_chain_path()
        )
        self._session = requests.session()
        self._connected = True

    def _project_user(self):
        # project users are named <project>__<user>
        return os.environ.get(self.HADOOP_USER_NAME) or os.environ[self.HDFS_USER]

    def _material_path(self, material):
        """Path of a key material file, the local copy takes precedence."""
        local_name, suffix = material
        if Path(local_name).exists():
            return local_name
        return str(
            Path(os.environ[self.MATERIAL_DIRECTORY]).joinpath(
                os.environ[self.HADOOP_USER_NAME] + suffix
            )
        )

    def _get_ca_chain_path(self):
        """PEM bundle of the CA certificates in the key and trust store, written
        on first use since `requests` cannot read JKS."""
        ca_chain_path = Path(self.PEM_CA_CHAIN)
        if not ca_chain_path.exists():
            with ca_chain_path.open("w") as f:
                for store_path in (self._key_store_path, self._trust_store_path):
                    f.write(self._jks_ca_certs_to_pem(store_path))
        return str(ca_chain_path)

    def _jks_ca_certs_to_pem(self, jks_path):
        ks = jks.KeyStore.load(jks_path, self._cert_key, try_decrypt_keys=True)
        return "".join(
            self._bytes_to_pem_str(c.cert, "CERTIFICATE") for c in ks.certs.values()
        )

    @staticmethod
    def _bytes_to_pem_str(der_bytes, pem_type):
        body = "\r\n".join(
            textwrap.wrap(base64.b64encode(der_bytes).decode("ascii"), 64)
        )
        return "-----BEGIN {0}-----\n{1}\n-----END {0}-----\n".format(pem_type, body)
