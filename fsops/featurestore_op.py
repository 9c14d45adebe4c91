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

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class FeaturestoreOp(ABC):
    """Base of the feature store operations.

    An operation is configured through its fluent setters and executed with
    `read()` or `write()`. Setters do not validate their input, invalid
    configurations are reported when the operation runs.
    """

    def __init__(self, name: Optional[str] = None) -> None:
        self._name = name
        self._featurestore = None
        self._version = 1
        self._spark = None
        self._jdbc_arguments = None
        self._online = False
        self._dataframe_type = "default"

    @abstractmethod
    def read(self):
        pass

    @abstractmethod
    def write(self):
        pass

    def set_name(self, name: str) -> FeaturestoreOp:
        self._name = name
        return self

    def set_featurestore(self, featurestore: Optional[str]) -> FeaturestoreOp:
        self._featurestore = featurestore
        return self

    def set_spark(self, spark) -> FeaturestoreOp:
        self._spark = spark
        return self

    def set_version(self, version: int) -> FeaturestoreOp:
        self._version = version
        return self

    def set_jdbc_arguments(
        self, jdbc_arguments: Optional[Dict[str, Any]]
    ) -> FeaturestoreOp:
        self._jdbc_arguments = jdbc_arguments
        return self

    def set_online(self, online: bool) -> FeaturestoreOp:
        self._online = online
        return self

    def set_dataframe_type(self, dataframe_type: str) -> FeaturestoreOp:
        self._dataframe_type = dataframe_type
        return self

    @property
    def name(self) -> Optional[str]:
        """Name of the feature group to operate on."""
        return self._name

    @property
    def featurestore(self) -> Optional[str]:
        """Name of the feature store, `None` for the project feature store."""
        return self._featurestore

    @property
    def version(self) -> int:
        return self._version

    @property
    def spark(self):
        """Spark session, `None` for the session of the connection's engine."""
        return self._spark

    @property
    def jdbc_arguments(self) -> Optional[Dict[str, Any]]:
        return self._jdbc_arguments

    @property
    def online(self) -> bool:
        return self._online

    @property
    def dataframe_type(self) -> str:
        return self._dataframe_type
