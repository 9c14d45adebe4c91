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

from typing import Any, Dict, List, Optional

from fsops import feature_group_descriptor, feature_store, storage_connector
from fsops.client.exceptions import FeaturestoreMetadataError


class FeaturestoreMetadata:
    """Snapshot of the metadata of a feature store: the feature store itself, its
    feature groups, its storage connectors and the connector of its online
    feature store."""

    def __init__(
        self,
        featurestore: feature_store.FeatureStore,
        feature_groups: List[feature_group_descriptor.FeatureGroupDescriptor],
        storage_connectors: List[storage_connector.StorageConnector],
        online_featurestore_connector: Optional[storage_connector.JdbcConnector] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._featurestore = featurestore
        self._feature_groups = feature_groups
        self._storage_connectors = storage_connectors
        self._online_featurestore_connector = online_featurestore_connector
        self._settings = settings or {}

    @classmethod
    def from_response_json(cls, json_dict: Dict[str, Any]) -> FeaturestoreMetadata:
        # nested objects are decamelized by their own parsers
        try:
            online_connector_json = json_dict.get("onlineFeaturestoreConnector")
            return cls(
                featurestore=feature_store.FeatureStore.from_response_json(
                    json_dict["featurestore"]
                ),
                feature_groups=[
                    feature_group_descriptor.FeatureGroupDescriptor.from_response_json(
                        fg_json
                    )
                    for fg_json in json_dict.get("featuregroups") or []
                ],
                storage_connectors=[
                    storage_connector.StorageConnector.from_response_json(sc_json)
                    for sc_json in json_dict.get("storageConnectors") or []
                ],
                online_featurestore_connector=(
                    storage_connector.StorageConnector.from_response_json(
                        online_connector_json
                    )
                    if online_connector_json
                    else None
                ),
                settings=json_dict.get("settings"),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise FeaturestoreMetadataError(
                "Could not parse the feature store metadata returned by Hopsworks: {}".format(
                    e
                )
            ) from e

    @property
    def featurestore(self) -> feature_store.FeatureStore:
        """The feature store the metadata describes."""
        return self._featurestore

    @property
    def feature_groups(self) -> List[feature_group_descriptor.FeatureGroupDescriptor]:
        """Feature groups of the feature store."""
        return self._feature_groups

    @property
    def storage_connectors(self) -> List[storage_connector.StorageConnector]:
        """Storage connectors of the feature store."""
        return self._storage_connectors

    @property
    def online_featurestore_connector(
        self,
    ) -> Optional[storage_connector.JdbcConnector]:
        """JDBC connector of the online feature store, if it was part of the metadata."""
        return self._online_featurestore_connector

    @property
    def settings(self) -> Dict[str, Any]:
        """Feature store settings of the Hopsworks cluster."""
        return self._settings

    def __repr__(self) -> str:
        return "FeaturestoreMetadata({!r}, feature_groups={}, storage_connectors={})".format(
            self._featurestore.name,
            len(self._feature_groups),
            len(self._storage_connectors),
        )
