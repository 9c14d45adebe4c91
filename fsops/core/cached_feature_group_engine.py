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

from fsops import util
from fsops.client import exceptions
from fsops.core import featurestore_metadata_engine, storage_connector_api


_logger = logging.getLogger(__name__)


class CachedFeatureGroupEngine:
    ONLINE_USER_ARG = "user"
    ONLINE_PASSWORD_ARG = "password"

    def __init__(self):
        self._metadata_engine = featurestore_metadata_engine.FeaturestoreMetadataEngine()
        self._storage_connector_api = storage_connector_api.StorageConnectorApi()

    def read(self, engine, name, featurestore, version, online=False):
        """Read a cached feature group from the offline or the online feature store.

        # Arguments
            engine: Execution engine used to run the read.
            name: Name of the feature group.
            featurestore: Name of the feature store.
            version: Version of the feature group.
            online: Read from the online feature store, defaults to `False`.

        # Returns
            `DataFrame`.
        """
        table_name = util.feature_group_table_name(name, version)
        if not online:
            _logger.info(
                "Reading feature group %s from the offline feature store %s",
                table_name,
                featurestore,
            )
            return engine.read_offline_feature_group(featurestore, table_name)

        online_connector = self._get_online_connector(featurestore)
        return engine.read_online_feature_group(
            table_name, online_connector.spark_options()
        )

    def _get_online_connector(self, featurestore):
        metadata = self._metadata_engine.get_metadata(featurestore)
        if not metadata.featurestore.online_enabled:
            raise exceptions.OnlineFeaturestoreNotEnabledError(
                "Online feature store is not enabled for feature store `{}`.".format(
                    featurestore
                )
            )

        connector = metadata.online_featurestore_connector
        if connector is None:
            _logger.debug(
                "Online feature store connector not part of the metadata, fetching it"
            )
            connector = self._storage_connector_api.get_online_connector(
                metadata.featurestore.id
            )

        arguments = connector.arguments
        if not arguments.get(self.ONLINE_USER_ARG):
            raise exceptions.OnlineFeaturestoreUserNotFoundError(
                "Could not find the database user of the online feature store "
                "in storage connector `{}`.".format(connector.name)
            )
        if not arguments.get(self.ONLINE_PASSWORD_ARG):
            raise exceptions.OnlineFeaturestorePasswordNotFoundError(
                "Could not find the database password of the online feature store "
                "in storage connector `{}`.".format(connector.name)
            )
        return connector
