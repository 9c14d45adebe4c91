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

import logging
import os
from abc import ABC, abstractmethod

import furl
import requests
import urllib3

from fsops.client import auth, exceptions
from fsops.decorators import connected


urllib3.disable_warnings(urllib3.exceptions.SecurityWarning)
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

_logger = logging.getLogger(__name__)


class Client(ABC):
    """REST client of the Hopsworks API, plus the project and the TLS key
    material the JDBC reads authenticate with."""

    TOKEN_FILE = "token.jwt"
    APIKEY_FILE = "api.key"
    REST_ENDPOINT = "REST_ENDPOINT"
    API_PATH = ["hopsworks-api", "api"]

    @abstractmethod
    def __init__(self):
        pass

    @staticmethod
    def _get_verify(verify, trust_store_path):
        """`verify` argument of `requests`: the CA bundle if one is provided,
        `True` to use the system CAs, `False` to skip hostname verification.

        :param verify: 'true' or 'false'
        :type verify: str
        """
        if verify != "true":
            return False
        return trust_store_path if trust_store_path is not None else True

    def _read_jwt(self):
        return self._read_secret(self.TOKEN_FILE)

    def _read_apikey(self):
        return self._read_secret(self.APIKEY_FILE)

    def _read_secret(self, secret_file):
        with open(os.path.join(self._secrets_dir, secret_file), "r") as secret:
            return secret.read()

    @connected
    def _send_request(self, method, path_params, query_params=None):
        """Send a REST request to Hopsworks and return the decoded JSON body.

        :param method: HTTP method, the feature store reads only issue 'GET'
        :type method: str
        :param path_params: path segments after `hopsworks-api/api`, url encoded
            automatically, e.g. `["project", 119, "featurestores", "demo_featurestore", "metadata"]`.
        :type path_params: list
        :param query_params: query parameters, defaults to None
        :type query_params: dict, optional
        :raises fsops.client.exceptions.RestAPIError: the response status is not 2xx
        :return: Response json, `None` for an empty body
        :rtype: dict
        """
        f_url = furl.furl(self._base_url)
        f_url.path.segments = self.API_PATH + [str(p) for p in path_params]
        url = str(f_url)
        _logger.debug("Sending %s request to %s", method, url)

        request = requests.Request(method, url=url, params=query_params, auth=self._auth)
        response = self._session.send(
            self._session.prepare_request(request), verify=self._verify
        )

        if response.status_code == 401 and self.REST_ENDPOINT in os.environ:
            # the JWT of jobs running on Hopsworks is rotated, retry once with the new one
            _logger.debug("Token expired, refreshing and retrying request")
            self._auth = request.auth = auth.BearerAuth(self._read_jwt())
            response = self._session.send(
                self._session.prepare_request(request), verify=self._verify
            )

        if response.status_code // 100 != 2:
            raise exceptions.RestAPIError(url, response)
        if len(response.content) == 0:
            return None
        return response.json()

    def _close(self):
        self._connected = False

    def _get_jks_trust_store_path(self):
        return self._trust_store_path

    def _get_jks_key_store_path(self):
        return self._key_store_path

    @property
    def project_id(self):
        return self._project_id

    @property
    def project_name(self):
        return self._project_name
