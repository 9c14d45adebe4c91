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

from typing import Any, Dict, List, Optional, TypeVar, Union

import humps
import numpy as np
import pandas as pd


class FeatureStore:
    """Feature Store handle, describing one feature store of a project.

    The handle is obtained from a `Connection` and is the entry point to read
    feature groups:

    !!! example
        ```python
        import fsops
        conn = fsops.connection()
        fs = conn.get_feature_store()

        df = fs.get_featuregroup("clicks", version=1)

        # or, configuring the read step by step
        df = fs.read_featuregroup("sessions").set_version(2).read()
        ```
    """

    def __init__(
        self,
        featurestore_id: int,
        featurestore_name: str,
        project_name: Optional[str] = None,
        project_id: Optional[int] = None,
        created: Optional[str] = None,
        online_enabled: bool = False,
        online_featurestore_name: Optional[str] = None,
        offline_featurestore_name: Optional[str] = None,
        hive_endpoint: Optional[str] = None,
        mysql_server_endpoint: Optional[str] = None,
        **kwargs,
    ) -> None:
        self._id = featurestore_id
        self._name = featurestore_name
        self._project_name = project_name
        self._project_id = project_id
        self._created = created
        self._online_enabled = online_enabled
        self._online_featurestore_name = online_featurestore_name
        self._offline_featurestore_name = offline_featurestore_name or featurestore_name
        self._hive_endpoint = hive_endpoint
        self._mysql_server_endpoint = mysql_server_endpoint

    @classmethod
    def from_response_json(cls, json_dict: Dict[str, Any]) -> FeatureStore:
        json_decamelized = humps.decamelize(json_dict)
        # fields not needed to read feature groups
        json_decamelized.pop("hdfs_store_path", None)
        json_decamelized.pop("featurestore_description", None)
        json_decamelized.pop("inode_id", None)
        return cls(**json_decamelized)

    def read_featuregroup(self, name: str):
        """Get a read operation for a feature group of this feature store.

        The returned `FeatureGroupReader` can be configured further with its
        setters before calling `read()`.

        # Arguments
            name: Name of the feature group to read.

        # Returns
            `FeatureGroupReader`.
        """
        from fsops import feature_group_reader

        return feature_group_reader.FeatureGroupReader(name).set_featurestore(
            self._name
        )

    def get_featuregroup(
        self,
        name: str,
        version: int = 1,
        online: bool = False,
        jdbc_arguments: Optional[Dict[str, Any]] = None,
        dataframe_type: str = "default",
    ) -> Union[
        TypeVar("pyspark.sql.DataFrame"),  # noqa: F821
        pd.DataFrame,
        np.ndarray,
        List[List[Any]],
    ]:
        """Read a feature group of this feature store into a dataframe.

        # Arguments
            name: Name of the feature group.
            version: Version of the feature group, defaults to `1`.
            online: Read the feature group from the online feature store instead
                of the offline feature store, defaults to `False`. Only applies to
                cached feature groups.
            jdbc_arguments: Values for the arguments of the JDBC storage connector
                of an on-demand feature group, defaults to `None`.
            dataframe_type: The type of the returned dataframe. Possible values are
                `"default"`, `"spark"`, `"pandas"`, `"numpy"` or `"python"`,
                defaults to `"default"` which maps to a Spark dataframe.

        # Returns
            `DataFrame`. The feature group data.

        # Raises
            `fsops.client.exceptions.FeatureGroupNotFoundError`: No feature group with
                this name and version exists in the feature store.
        """
        return (
            self.read_featuregroup(name)
            .set_version(version)
            .set_online(online)
            .set_jdbc_arguments(jdbc_arguments)
            .set_dataframe_type(dataframe_type)
            .read()
        )

    def get_featurestore_metadata(self, update_cache: bool = False):
        """Get the metadata of this feature store.

        # Arguments
            update_cache: Fetch the metadata from Hopsworks even if it is cached,
                defaults to `False`.

        # Returns
            `FeaturestoreMetadata`.
        """
        from fsops.core import featurestore_metadata_engine

        return featurestore_metadata_engine.FeaturestoreMetadataEngine().get_metadata(
            self._name, update_cache=update_cache
        )

    def get_featuregroups(self, update_cache: bool = False):
        """List the feature groups of this feature store.

        # Returns
            `List[FeatureGroupDescriptor]`.
        """
        return self.get_featurestore_metadata(update_cache).feature_groups

    def get_storage_connectors(self, update_cache: bool = False):
        """List the storage connectors of this feature store.

        # Returns
            `List[StorageConnector]`.
        """
        return self.get_featurestore_metadata(update_cache).storage_connectors

    @property
    def id(self) -> int:
        """Id of the feature store."""
        return self._id

    @property
    def name(self) -> str:
        """Name of the feature store."""
        return self._name

    @property
    def project_name(self) -> Optional[str]:
        """Name of the project in which the feature store is located."""
        return self._project_name

    @property
    def project_id(self) -> Optional[int]:
        """Id of the project in which the feature store is located."""
        return self._project_id

    @property
    def online_enabled(self) -> bool:
        """Indicator whether online feature store is enabled."""
        return self._online_enabled

    @property
    def online_featurestore_name(self) -> Optional[str]:
        """Name of the online feature store database."""
        return self._online_featurestore_name

    @property
    def offline_featurestore_name(self) -> str:
        """Name of the offline feature store database."""
        return self._offline_featurestore_name

    @property
    def hive_endpoint(self) -> Optional[str]:
        return self._hive_endpoint

    @property
    def mysql_server_endpoint(self) -> Optional[str]:
        return self._mysql_server_endpoint

    def __repr__(self) -> str:
        return f"FeatureStore({self._name!r})"
