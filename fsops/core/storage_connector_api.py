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

from fsops import client, storage_connector
from fsops.client import exceptions


class StorageConnectorApi:
    def get_online_connector(
        self, feature_store_id: int
    ) -> storage_connector.JdbcConnector:
        """Get the JDBC connector of the online feature store, including the database
        user and password of the project member.

        :param feature_store_id: feature store id
        :type feature_store_id: int
        :raises fsops.client.exceptions.OnlineFeaturestoreNotEnabledError: the online feature
            store is not enabled for the project
        :return: the online feature store connector
        :rtype: JdbcConnector
        """
        _client = client.get_instance()
        path_params = [
            "project",
            _client._project_id,
            "featurestores",
            feature_store_id,
            "storageconnectors",
            "onlinefeaturestore",
        ]

        try:
            response_json = _client._send_request("GET", path_params)
        except exceptions.RestAPIError as e:
            if e.status_code == exceptions.RestAPIError.NOT_FOUND:
                raise exceptions.OnlineFeaturestoreNotEnabledError(
                    "Online feature store is not enabled for the project."
                ) from e
            raise
        return storage_connector.StorageConnector.from_response_json(response_json)

