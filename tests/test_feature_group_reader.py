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

import dataclasses

import pytest
from fsops import feature_group_reader, featurestore_metadata
from fsops.client import exceptions
from fsops.feature_group_descriptor import FeatureGroupType


FEATURE_STORE = "test_project_featurestore"


@pytest.fixture
def metadata(backend_fixtures):
    return featurestore_metadata.FeaturestoreMetadata.from_response_json(
        backend_fixtures["featurestore_metadata"]["get"]["response"]
    )


@pytest.fixture
def mock_metadata_api(mocker, metadata):
    return mocker.patch(
        "fsops.core.featurestore_metadata_api.FeaturestoreMetadataApi.get",
        return_value=metadata,
    )


@pytest.fixture
def mock_engine(mocker):
    spark_engine = mocker.Mock()
    spark_engine._return_dataframe_type.side_effect = lambda df, df_type: df
    mocker.patch("fsops.engine.get_instance", return_value=spark_engine)
    return spark_engine


class TestFeatureGroupReader:
    def test_read_cached(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )
        mock_on_demand_read = mocker.patch(
            "fsops.feature_group_reader.FeatureGroupReader.read_on_demand_featuregroup"
        )

        reader = feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
            FEATURE_STORE
        )

        # Act
        df = reader.read()

        # Assert
        mock_cached_read.assert_called_once_with(
            mock_engine, "clicks", FEATURE_STORE, 1, False
        )
        assert df is mock_cached_read.return_value
        assert mock_on_demand_read.call_count == 0
        assert mock_engine.register_custom_jdbc_dialects.call_count == 0
        assert mock_engine.read_on_demand_feature_group.call_count == 0

    def test_read_cached_online(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        reader = (
            feature_group_reader.FeatureGroupReader("clicks")
            .set_featurestore(FEATURE_STORE)
            .set_version(3)
            .set_online(True)
        )

        # Act
        reader.read()

        # Assert
        mock_cached_read.assert_called_once_with(
            mock_engine, "clicks", FEATURE_STORE, 3, True
        )

    def test_read_on_demand(self, mocker, mock_metadata_api, mock_engine, metadata):
        # Arrange
        mock_connection_url = mocker.patch(
            "fsops.storage_connector.JdbcConnector.connection_url",
            return_value="jdbc:hive2://analytics.local:9085/analytics;",
        )
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        reader = (
            feature_group_reader.FeatureGroupReader("sessions")
            .set_featurestore(FEATURE_STORE)
            .set_version(2)
        )

        # Act
        df = reader.read()

        # Assert
        assert mock_connection_url.call_count == 1
        assert mock_engine.register_custom_jdbc_dialects.call_count == 1
        assert mock_engine.read_on_demand_feature_group.call_count == 1
        descriptor, jdbc_url, featurestore_name = (
            mock_engine.read_on_demand_feature_group.call_args[0]
        )
        assert descriptor.name == "sessions"
        assert descriptor.version == 2
        assert descriptor.feature_group_type == FeatureGroupType.ON_DEMAND
        assert jdbc_url == "jdbc:hive2://analytics.local:9085/analytics;"
        assert featurestore_name == FEATURE_STORE
        assert df is mock_engine.read_on_demand_feature_group.return_value
        assert mock_cached_read.call_count == 0

    def test_read_on_demand_jdbc_arguments(
        self, mocker, mock_metadata_api, mock_engine
    ):
        # Arrange
        mock_connection_url = mocker.patch(
            "fsops.storage_connector.JdbcConnector.connection_url",
            return_value="jdbc:url",
        )
        jdbc_arguments = {"sslTrustStore": "/tmp/trustStore.jks"}

        reader = (
            feature_group_reader.FeatureGroupReader("sessions")
            .set_featurestore(FEATURE_STORE)
            .set_version(2)
            .set_jdbc_arguments(jdbc_arguments)
        )

        # Act
        reader.read()

        # Assert
        passed_arguments = mock_connection_url.call_args[0][0]
        assert dict(passed_arguments) == {"sslTrustStore": "/tmp/trustStore.jks"}
        with pytest.raises(TypeError):
            passed_arguments["sslTrustStore"] = "/tmp/other.jks"

    def test_read_on_demand_connector_not_found(
        self, mocker, mock_metadata_api, mock_engine
    ):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        reader = feature_group_reader.FeatureGroupReader("orders").set_featurestore(
            FEATURE_STORE
        )

        # Act
        with pytest.raises(exceptions.StorageConnectorNotFoundError) as e_info:
            reader.read()

        # Assert
        assert e_info.value.name == "missing_db"
        assert mock_engine.register_custom_jdbc_dialects.call_count == 0
        assert mock_engine.read_on_demand_feature_group.call_count == 0
        assert mock_cached_read.call_count == 0

    def test_read_on_demand_connector_not_jdbc(
        self, mock_metadata_api, mock_engine
    ):
        # Arrange
        reader = feature_group_reader.FeatureGroupReader("files").set_featurestore(
            FEATURE_STORE
        )

        # Act
        with pytest.raises(exceptions.FeatureStoreException) as e_info:
            reader.read()

        # Assert
        assert "expected a JDBC connector" in str(e_info.value)
        assert mock_engine.register_custom_jdbc_dialects.call_count == 0
        assert mock_engine.read_on_demand_feature_group.call_count == 0

    def test_read_feature_group_not_found(
        self, mocker, mock_metadata_api, mock_engine
    ):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        reader = (
            feature_group_reader.FeatureGroupReader("clicks")
            .set_featurestore(FEATURE_STORE)
            .set_version(2)
        )

        # Act
        with pytest.raises(exceptions.FeatureGroupNotFoundError) as e_info:
            reader.read()

        # Assert
        assert "available versions are [1, 3]" in str(e_info.value)
        assert mock_cached_read.call_count == 0
        assert mock_engine.read_on_demand_feature_group.call_count == 0
        assert mock_engine.set_job_group.call_count == 0

    def test_read_sets_job_group(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        reader = feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
            FEATURE_STORE
        )

        # Act
        reader.read()

        # Assert
        mock_engine.set_job_group.assert_called_once_with(
            "Fetching Feature Group",
            "Getting Feature group: clicks from the featurestore:"
            "test_project_featurestore",
        )

    def test_read_default_featurestore(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mocker.patch("fsops.client.get_instance").return_value.project_name = (
            "Test_Project"
        )
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        # Act
        feature_group_reader.FeatureGroupReader("clicks").read()

        # Assert
        mock_metadata_api.assert_called_once_with(FEATURE_STORE)
        assert mock_cached_read.call_args[0][2] == FEATURE_STORE

    def test_read_normalizes_featurestore(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        # Act
        feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
            "Test_Project_Featurestore"
        ).read()
        feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
            "test_project"
        ).read()

        # Assert
        mock_metadata_api.assert_called_once_with(FEATURE_STORE)
        assert [call.args[2] for call in mock_cached_read.call_args_list] == [
            FEATURE_STORE,
            FEATURE_STORE,
        ]

    def test_read_uses_metadata_cache(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        # Act
        for _ in range(2):
            feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
                FEATURE_STORE
            ).read()

        # Assert
        assert mock_metadata_api.call_count == 1

    def test_read_with_spark_session(self, mocker, mock_metadata_api):
        # Arrange
        mock_engine_init = mocker.patch("fsops.engine.spark.Engine")
        mock_get_instance = mocker.patch("fsops.engine.get_instance")
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )
        session = mocker.Mock()

        reader = (
            feature_group_reader.FeatureGroupReader("clicks")
            .set_featurestore(FEATURE_STORE)
            .set_spark(session)
        )

        # Act
        reader.read()

        # Assert
        mock_engine_init.assert_called_with(session)
        assert mock_cached_read.call_args[0][0] is mock_engine_init.return_value
        assert mock_get_instance.call_count == 0

    def test_read_dataframe_type(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )

        reader = (
            feature_group_reader.FeatureGroupReader("clicks")
            .set_featurestore(FEATURE_STORE)
            .set_dataframe_type("pandas")
        )

        # Act
        reader.read()

        # Assert
        mock_engine._return_dataframe_type.assert_called_once_with(
            mock_cached_read.return_value, "pandas"
        )

    def test_read_name_not_set(self, mock_metadata_api, mock_engine):
        # Arrange
        reader = feature_group_reader.FeatureGroupReader().set_featurestore(
            FEATURE_STORE
        )

        # Act
        with pytest.raises(exceptions.FeatureStoreException):
            reader.read()

        # Assert
        assert mock_metadata_api.call_count == 0

    def test_read_propagates_hive_not_enabled(
        self, mocker, mock_metadata_api, mock_engine
    ):
        # Arrange
        mock_engine.read_offline_feature_group.side_effect = (
            exceptions.HiveNotEnabledError()
        )

        reader = feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
            FEATURE_STORE
        )

        # Act
        with pytest.raises(exceptions.HiveNotEnabledError):
            reader.read()

        # Assert
        mock_engine.read_offline_feature_group.assert_called_once_with(
            FEATURE_STORE, "clicks_1"
        )

    @pytest.mark.parametrize(
        "configure",
        [
            lambda reader: reader,
            lambda reader: reader.set_name("clicks").set_version(4),
            lambda reader: reader.set_online(True).set_jdbc_arguments({"a": "b"}),
        ],
    )
    def test_write(self, configure):
        # Arrange
        reader = configure(feature_group_reader.FeatureGroupReader())

        # Act
        with pytest.raises(exceptions.UnsupportedOperationError) as e_info:
            reader.write()

        # Assert
        assert isinstance(e_info.value, NotImplementedError)
        assert isinstance(e_info.value, exceptions.FeatureStoreException)
        assert str(e_info.value) == "write() is not supported on a read operation"

    def test_defaults(self):
        # Act
        reader = feature_group_reader.FeatureGroupReader()

        # Assert
        assert reader.name is None
        assert reader.featurestore is None
        assert reader.version == 1
        assert reader.spark is None
        assert reader.jdbc_arguments is None
        assert reader.online is False
        assert reader.dataframe_type == "default"

    @pytest.mark.parametrize(
        "setter, field, value",
        [
            ("set_name", "name", "sessions"),
            ("set_featurestore", "featurestore", "analytics_featurestore"),
            ("set_spark", "spark", object()),
            ("set_version", "version", 7),
            ("set_jdbc_arguments", "jdbc_arguments", {"password": "secret"}),
            ("set_online", "online", True),
            ("set_dataframe_type", "dataframe_type", "numpy"),
        ],
    )
    def test_setters(self, setter, field, value):
        # Arrange
        reader = feature_group_reader.FeatureGroupReader("clicks")
        fields = [
            "name",
            "featurestore",
            "version",
            "spark",
            "jdbc_arguments",
            "online",
            "dataframe_type",
        ]
        before = {f: getattr(reader, f) for f in fields}

        # Act
        result = getattr(reader, setter)(value)

        # Assert
        assert result is reader
        assert getattr(reader, field) is value
        for f in fields:
            if f != field:
                assert getattr(reader, f) == before[f]

    def test_build_request(self):
        # Arrange
        jdbc_arguments = {"password": "secret"}
        reader = (
            feature_group_reader.FeatureGroupReader("sessions")
            .set_featurestore(FEATURE_STORE)
            .set_version(2)
            .set_jdbc_arguments(jdbc_arguments)
        )

        # Act
        request = reader._build_request()
        jdbc_arguments["password"] = "changed"
        reader.set_version(5)

        # Assert
        assert request.name == "sessions"
        assert request.version == 2
        assert request.table_name == "sessions_2"
        assert request.jdbc_arguments["password"] == "secret"
        with pytest.raises(dataclasses.FrozenInstanceError):
            request.version = 3


class TestFeatureGroupReaderExample:
    def test_clicks_and_sessions(self, mocker, mock_metadata_api, mock_engine):
        # Arrange
        mock_cached_read = mocker.patch(
            "fsops.core.cached_feature_group_engine.CachedFeatureGroupEngine.read"
        )
        mock_find_connector = mocker.spy(
            feature_group_reader.featurestore_metadata_engine.FeaturestoreMetadataEngine,
            "find_storage_connector",
        )
        mock_connection_url = mocker.patch(
            "fsops.storage_connector.JdbcConnector.connection_url",
            return_value="jdbc:url",
        )

        # Act
        feature_group_reader.FeatureGroupReader("clicks").set_featurestore(
            FEATURE_STORE
        ).read()
        feature_group_reader.FeatureGroupReader("sessions").set_featurestore(
            FEATURE_STORE
        ).set_version(2).read()

        # Assert
        mock_cached_read.assert_called_once_with(
            mock_engine, "clicks", FEATURE_STORE, 1, False
        )
        assert mock_find_connector.call_args[0][-1] == "analytics_db"
        assert mock_connection_url.call_count == 1
        assert mock_engine.register_custom_jdbc_dialects.call_count == 1
        assert mock_engine.read_on_demand_feature_group.call_args[0][1] == "jdbc:url"
