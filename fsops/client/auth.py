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


class TokenAuth(requests.auth.AuthBase):
    """Sets the `Authorization` header of every request to `<scheme> <token>`."""

    scheme = None

    def __init__(self, token: str) -> None:
        self._token = token.strip()

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = "{} {}".format(self.scheme, self._token)
        return r

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(scheme={self.scheme!r})"


class BearerAuth(TokenAuth):
    """JWT issued by Hopsworks to jobs and notebooks running on the cluster."""

    scheme = "Bearer"


class ApiKeyAuth(TokenAuth):
    """API key of a Hopsworks user, used by external clients."""

    scheme = "ApiKey"
