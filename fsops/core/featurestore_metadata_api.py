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

from fsops import client, featurestore_metadata
from fsops.client import exceptions


_logger = logging.getLogger(__name__)


class FeaturestoreMetadataApi:
    def get(self, featurestore_name: str) -> featurestore_metadata.FeaturestoreMetadata:
        """Get the metadata of a feature store: feature groups, storage connectors and
        the online feature store connector.

        :param featurestore_name: name of the feature store
        :type featurestore_name: str
        :raises fsops.client.exceptions.FeaturestoreNotFound: the feature store does not exist
            or is not shared with the project
        :return: the feature store metadata
        :rtype: FeaturestoreMetadata
        """
        _client = client.get_instance()
        path_params = [
            "project",
            _client._project_id,
            "featurestores",
            featurestore_name,
            "metadata",
        ]
        _logger.info("Fetching metadata of feature store %s", featurestore_name)
        try:
            response_json = _client._send_request("GET", path_params)
        except exceptions.RestAPIError as e:
            if e.status_code == exceptions.RestAPIError.NOT_FOUND:
                raise exceptions.FeaturestoreNotFound(
                    "Could not find the feature store `{}` in project `{}`.".format(
                        featurestore_name, _client._project_name
                    )
                ) from e
            raise
        return featurestore_metadata.FeaturestoreMetadata.from_response_json(
            response_json
        )
