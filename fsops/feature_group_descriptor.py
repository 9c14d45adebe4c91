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

from enum import Enum
from typing import Any, Dict, List, Optional, Union

import humps
from fsops import util


class FeatureGroupType(str, Enum):
    CACHED = "CACHED_FEATURE_GROUP"
    ON_DEMAND = "ON_DEMAND_FEATURE_GROUP"


class FeatureGroupDescriptor:
    """Metadata of a feature group as listed in the feature store metadata.

    The concrete variant is decided once, when the metadata is parsed, from the
    `type` field returned by Hopsworks.
    """

    BACKEND_TYPE: str = None
    feature_group_type: FeatureGroupType = None

    def __init__(
        self,
        name: str,
        version: int,
        id: Optional[int] = None,
        featurestore_id: Optional[int] = None,
        featurestore_name: Optional[str] = None,
        description: Optional[str] = None,
        created: Optional[str] = None,
        creator: Optional[Union[str, Dict[str, Any]]] = None,
        features: Optional[List[Dict[str, Any]]] = None,
        **kwargs,
    ) -> None:
        self._name = name
        self._version = version
        self._id = id
        self._featurestore_id = featurestore_id
        self._featurestore_name = featurestore_name
        self._description = description
        self._created = created
        self._creator = creator
        self._features = features or []

    @classmethod
    def from_response_json(
        cls, json_dict: Dict[str, Any]
    ) -> Union["CachedFeatureGroupDescriptor", "OnDemandFeatureGroupDescriptor"]:
        json_decamelized = humps.decamelize(json_dict)
        backend_type = json_decamelized.pop("type")
        for subcls in cls.__subclasses__():
            if subcls.BACKEND_TYPE == backend_type:
                return subcls(**json_decamelized)
        raise ValueError(
            "Feature group type `{}` is not supported.".format(backend_type)
        )

    def matches(self, name: str, version: int) -> bool:
        return self._name == name and self._version == version

    @property
    def id(self) -> Optional[int]:
        """Feature group id."""
        return self._id

    @property
    def name(self) -> str:
        """Name of the feature group."""
        return self._name

    @property
    def version(self) -> int:
        """Version number of the feature group."""
        return self._version

    @property
    def table_name(self) -> str:
        """Name of the table backing the feature group, `<name>_<version>`."""
        return util.feature_group_table_name(self._name, self._version)

    @property
    def featurestore_id(self) -> Optional[int]:
        return self._featurestore_id

    @property
    def featurestore_name(self) -> Optional[str]:
        return self._featurestore_name

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def created(self) -> Optional[str]:
        return self._created

    @property
    def creator(self) -> Optional[Union[str, Dict[str, Any]]]:
        return self._creator

    @property
    def features(self) -> List[Dict[str, Any]]:
        """Schema of the feature group as returned by Hopsworks."""
        return self._features

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._name!r}, {self._version!r})"


class CachedFeatureGroupDescriptor(FeatureGroupDescriptor):
    BACKEND_TYPE = "cachedFeaturegroupDTO"
    feature_group_type = FeatureGroupType.CACHED

    def __init__(
        self,
        name: str,
        version: int,
        online_enabled: bool = False,
        hudi_enabled: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(name, version, **kwargs)
        self._online_enabled = online_enabled
        self._hudi_enabled = hudi_enabled

    @property
    def online_enabled(self) -> bool:
        """Whether the feature group is also materialized in the online feature store."""
        return self._online_enabled

    @property
    def hudi_enabled(self) -> bool:
        return self._hudi_enabled


class OnDemandFeatureGroupDescriptor(FeatureGroupDescriptor):
    BACKEND_TYPE = "onDemandFeaturegroupDTO"
    feature_group_type = FeatureGroupType.ON_DEMAND

    def __init__(
        self,
        name: str,
        version: int,
        jdbc_connector_name: str = None,
        query: str = None,
        jdbc_connector_id: Optional[int] = None,
        **kwargs,
    ) -> None:
        super().__init__(name, version, **kwargs)
        self._jdbc_connector_id = jdbc_connector_id
        self._jdbc_connector_name = jdbc_connector_name
        self._query = query

    @property
    def jdbc_connector_id(self) -> Optional[int]:
        return self._jdbc_connector_id

    @property
    def jdbc_connector_name(self) -> str:
        """Name of the JDBC storage connector the query is executed against."""
        return self._jdbc_connector_name

    @property
    def query(self) -> str:
        """SQL query computing the feature group."""
        return self._query
