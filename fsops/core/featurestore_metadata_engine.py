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
from typing import Dict, List, Optional

from fsops import (
    feature_group_descriptor,
    featurestore_metadata,
    storage_connector,
    util,
)
from fsops.client import exceptions
from fsops.core import featurestore_metadata_api


_logger = logging.getLogger(__name__)

# metadata per feature store name, kept for the lifetime of the process
_metadata_cache: Dict[str, featurestore_metadata.FeaturestoreMetadata] = {}


class FeaturestoreMetadataEngine:
    def __init__(self):
        self._featurestore_metadata_api = (
            featurestore_metadata_api.FeaturestoreMetadataApi()
        )

    def get_metadata(
        self, featurestore: Optional[str] = None, update_cache: bool = False
    ) -> featurestore_metadata.FeaturestoreMetadata:
        """Get the metadata of a feature store, fetching it from Hopsworks only if it
        is not cached yet or `update_cache` is set."""
        featurestore = util.default_featurestore(featurestore)
        if update_cache or featurestore not in _metadata_cache:
            _metadata_cache[featurestore] = self._featurestore_metadata_api.get(
                featurestore
            )
        else:
            _logger.debug("Using cached metadata of feature store %s", featurestore)
        return _metadata_cache[featurestore]

    def invalidate(self, featurestore: Optional[str] = None) -> None:
        if featurestore is None:
            _metadata_cache.clear()
        else:
            _metadata_cache.pop(util.append_feature_store_suffix(featurestore), None)

    @staticmethod
    def find_feature_group(
        feature_groups: List[feature_group_descriptor.FeatureGroupDescriptor],
        name: str,
        version: int,
    ) -> feature_group_descriptor.FeatureGroupDescriptor:
        for fg in feature_groups:
            if fg.matches(name, version):
                _logger.debug("Found feature group %s", fg.table_name)
                return fg

        raise exceptions.FeatureGroupNotFoundError(
            name,
            version,
            sorted(fg.version for fg in feature_groups if fg.name == name),
        )

    @staticmethod
    def find_storage_connector(
        storage_connectors: List[storage_connector.StorageConnector], name: str
    ) -> storage_connector.StorageConnector:
        for connector in storage_connectors:
            if connector.name == name:
                return connector
        raise exceptions.StorageConnectorNotFoundError(name)
