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

import os
import sys

import pytest
from fsops import client, engine
from fsops.core import featurestore_metadata_engine
from fsops.engine import spark


pytest_plugins = [
    "tests.fixtures.backend_fixtures",
]

os.environ["PYSPARK_PYTHON"] = sys.executable
os.environ["PYSPARK_DRIVER_PYTHON"] = sys.executable


@pytest.fixture(autouse=True)
def reset_session_state():
    featurestore_metadata_engine._metadata_cache.clear()
    spark._registered_jdbc_dialects.clear()
    yield
    featurestore_metadata_engine._metadata_cache.clear()
    spark._registered_jdbc_dialects.clear()
    client._client = None
    engine.stop()
