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

from typing import Optional

from fsops import client


FEATURE_STORE_NAME_SUFFIX = "_featurestore"


def feature_group_table_name(name: str, version: int) -> str:
    return name + "_" + str(version)


def append_feature_store_suffix(name: str) -> str:
    name = name.lower()
    if name.endswith(FEATURE_STORE_NAME_SUFFIX):
        return name
    else:
        return name + FEATURE_STORE_NAME_SUFFIX


def get_project_featurestore() -> str:
    """Name of the feature store of the project the client is connected to."""
    return append_feature_store_suffix(client.get_instance().project_name)


def default_featurestore(featurestore: Optional[str]) -> str:
    """Normalized feature store name, the project feature store if `None`."""
    if featurestore is None:
        return get_project_featurestore()
    return append_feature_store_suffix(featurestore)


class StorageWarning(Warning):
    pass
