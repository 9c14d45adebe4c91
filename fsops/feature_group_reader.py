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
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from fsops import engine, featurestore_op, storage_connector, util
from fsops.client import exceptions
from fsops.core import cached_feature_group_engine, featurestore_metadata_engine
from fsops.engine import spark
from fsops.feature_group_descriptor import FeatureGroupType


_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReadRequest:
    """Immutable snapshot of a `FeatureGroupReader` configuration taken when the
    read runs."""

    name: str
    featurestore: str
    version: int = 1
    spark: Any = None
    jdbc_arguments: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    online: bool = False
    dataframe_type: str = "default"

    @property
    def table_name(self) -> str:
        return util.feature_group_table_name(self.name, self.version)


class FeatureGroupReader(featurestore_op.FeaturestoreOp):
    """Operation reading a feature group of a feature store.

    On-demand feature groups are read by running their query through the JDBC
    storage connector they reference, cached feature groups are read from the
    offline or online feature store.

    !!! example
        ```python
        df = (
            FeatureGroupReader("sessions")
            .set_version(2)
            .set_jdbc_arguments({"password": "secret"})
            .read()
        )
        ```
    """

    JOB_GROUP = "Fetching Feature Group"

    def __init__(self, name: Optional[str] = None) -> None:
        super().__init__(name)
        self._metadata_engine = featurestore_metadata_engine.FeaturestoreMetadataEngine()
        self._cached_feature_group_engine = (
            cached_feature_group_engine.CachedFeatureGroupEngine()
        )

    def read(self):
        """Read the feature group into a dataframe.

        # Returns
            `DataFrame`. A Spark DataFrame, unless another `dataframe_type` was set.

        # Raises
            `fsops.client.exceptions.FeatureGroupNotFoundError`: No feature group with
                the name and version exists in the feature store.
            `fsops.client.exceptions.StorageConnectorNotFoundError`: The JDBC
                connector of an on-demand feature group does not exist.
            `fsops.client.exceptions.HiveNotEnabledError`: The Spark session has no
                Hive support.
        """
        request = self._build_request()
        metadata = self._metadata_engine.get_metadata(request.featurestore)
        descriptor = self._metadata_engine.find_feature_group(
            metadata.feature_groups, request.name, request.version
        )

        spark_engine = self._get_engine(request)
        spark_engine.set_job_group(
            self.JOB_GROUP,
            "Getting Feature group: {} from the featurestore:{}".format(
                request.name, request.featurestore
            ),
        )

        if descriptor.feature_group_type == FeatureGroupType.ON_DEMAND:
            dataframe = self.read_on_demand_featuregroup(descriptor, metadata)
        else:
            dataframe = self.read_cached_featuregroup()
        return spark_engine._return_dataframe_type(dataframe, request.dataframe_type)

    def read_on_demand_featuregroup(self, descriptor, metadata):
        """Read an on-demand feature group through its JDBC storage connector.

        # Arguments
            descriptor: `OnDemandFeatureGroupDescriptor` of the feature group.
            metadata: `FeaturestoreMetadata` of the feature store holding it.

        # Returns
            `DataFrame`. The Spark DataFrame of the query result.
        """
        request = self._build_request()
        connector = self._metadata_engine.find_storage_connector(
            metadata.storage_connectors, descriptor.jdbc_connector_name
        )
        if connector.type != storage_connector.StorageConnector.JDBC:
            raise exceptions.FeatureStoreException(
                "Storage connector `{}` of on-demand feature group `{}` is of type "
                "`{}`, expected a JDBC connector.".format(
                    connector.name, descriptor.table_name, connector.type
                )
            )

        spark_engine = self._get_engine(request)
        jdbc_url = connector.connection_url(request.jdbc_arguments)
        spark_engine.register_custom_jdbc_dialects()
        _logger.info(
            "Reading on-demand feature group %s using storage connector %s",
            descriptor.table_name,
            connector.name,
        )
        return spark_engine.read_on_demand_feature_group(
            descriptor, jdbc_url, metadata.featurestore.name
        )

    def read_cached_featuregroup(self):
        """Read the configured feature group from the offline or online feature store.

        # Returns
            `DataFrame`. The Spark DataFrame of the feature group.
        """
        request = self._build_request()
        return self._cached_feature_group_engine.read(
            self._get_engine(request),
            request.name,
            request.featurestore,
            request.version,
            request.online,
        )

    def write(self):
        raise exceptions.UnsupportedOperationError(
            "write() is not supported on a read operation"
        )

    def _build_request(self) -> ReadRequest:
        if self._name is None:
            raise exceptions.FeatureStoreException(
                "The name of the feature group to read is not set."
            )
        return ReadRequest(
            name=self._name,
            featurestore=util.default_featurestore(self._featurestore),
            version=self._version,
            spark=self._spark,
            jdbc_arguments=MappingProxyType(dict(self._jdbc_arguments or {})),
            online=self._online,
            dataframe_type=self._dataframe_type,
        )

    @staticmethod
    def _get_engine(request: ReadRequest):
        if request.spark is not None:
            return spark.Engine(request.spark)
        return engine.get_instance()

    def __repr__(self) -> str:
        return "FeatureGroupReader({!r}, version={}, featurestore={!r})".format(
            self._name, self._version, self._featurestore
        )
