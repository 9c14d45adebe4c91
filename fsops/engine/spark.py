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
from typing import Any, Dict, List, Optional, Set


try:
    from py4j.protocol import Py4JJavaError
    from pyspark.sql import DataFrame, SparkSession
except ImportError:
    pass

from fsops.client.exceptions import HiveNotEnabledError
from fsops.feature_group_descriptor import OnDemandFeatureGroupDescriptor


_logger = logging.getLogger(__name__)

# dialect classes already handled in this process, registered or not found
_registered_jdbc_dialects: Set[str] = set()


class Engine:
    HIVE_FORMAT = "hive"
    JDBC_FORMAT = "jdbc"

    CATALOG_IMPLEMENTATION = "spark.sql.catalogImplementation"
    CUSTOM_JDBC_DIALECTS_CONF = "spark.fsops.jdbc.dialects"
    HIVE_JDBC_DIALECT = "io.hops.util.featurestore.jdbc.HiveJdbcDialect"
    ON_DEMAND_QUERY_ALIAS = "fs_q"

    def __init__(self, spark_session: Optional[SparkSession] = None):
        if spark_session is None:
            spark_session = SparkSession.builder.enableHiveSupport().getOrCreate()
        self._spark_session = spark_session
        self._spark_context = self._spark_session.sparkContext
        self._jvm = self._spark_context._jvm

    @property
    def spark_session(self) -> SparkSession:
        return self._spark_session

    def set_job_group(self, group_id, description):
        self._spark_context.setJobGroup(group_id, description, True)

    def register_custom_jdbc_dialects(self) -> None:
        """Register the custom JDBC dialects with Spark's `JdbcDialects`.

        Each dialect class is handled once per process, calling this method again
        is a no-op. Dialect classes missing from the driver classpath are skipped
        with a warning.
        """
        for dialect_class in self._custom_jdbc_dialects():
            if dialect_class in _registered_jdbc_dialects:
                continue
            try:
                dialect = self._jvm.java.lang.Class.forName(
                    dialect_class,
                    True,
                    self._jvm.java.lang.Thread.currentThread().getContextClassLoader(),
                ).newInstance()
            except Py4JJavaError:
                _registered_jdbc_dialects.add(dialect_class)
                _logger.warning(
                    "JDBC dialect %s is not on the classpath, it will not be registered.",
                    dialect_class,
                )
                continue
            self._jvm.org.apache.spark.sql.jdbc.JdbcDialects.registerDialect(dialect)
            _registered_jdbc_dialects.add(dialect_class)
            _logger.info("Registered JDBC dialect %s", dialect_class)

    def _custom_jdbc_dialects(self) -> List[str]:
        dialects = self._spark_session.conf.get(
            self.CUSTOM_JDBC_DIALECTS_CONF, self.HIVE_JDBC_DIALECT
        )
        return [dialect.strip() for dialect in dialects.split(",") if dialect.strip()]

    def read_on_demand_feature_group(
        self,
        on_demand_fg: OnDemandFeatureGroupDescriptor,
        jdbc_url: str,
        featurestore_name: str,
    ) -> DataFrame:
        """Read an on-demand feature group by executing its query through JDBC and
        register the result as temporary view `<name>_<version>` within the
        feature store database."""
        self._verify_hive_enabled()
        self._spark_session.sql("USE {}".format(featurestore_name))
        _logger.info(
            "Reading on-demand feature group %s through JDBC", on_demand_fg.table_name
        )
        on_demand_dataset = (
            self._spark_session.read.format(self.JDBC_FORMAT)
            .option("url", jdbc_url)
            .option(
                "dbtable",
                "({}) {}".format(on_demand_fg.query, self.ON_DEMAND_QUERY_ALIAS),
            )
            .load()
        )
        on_demand_dataset.createOrReplaceTempView(on_demand_fg.table_name)
        return on_demand_dataset

    def read_offline_feature_group(self, feature_store, table_name) -> DataFrame:
        self._verify_hive_enabled()
        return self._sql_offline("SELECT * FROM {}".format(table_name), feature_store)

    def read_online_feature_group(
        self, table_name: str, options: Dict[str, Any]
    ) -> DataFrame:
        _logger.info("Reading feature group %s from the online feature store", table_name)
        return (
            self._spark_session.read.format(self.JDBC_FORMAT)
            .options(**options)
            .option("dbtable", table_name)
            .load()
        )

    def _sql_offline(self, sql_query, feature_store):
        # set feature store
        self._spark_session.sql("USE {}".format(feature_store))
        _logger.debug("Running sql query on feature store %s: %s", feature_store, sql_query)
        return self._spark_session.sql(sql_query)

    def _verify_hive_enabled(self):
        if (
            self._spark_session.conf.get(self.CATALOG_IMPLEMENTATION, "in-memory")
            != self.HIVE_FORMAT
        ):
            raise HiveNotEnabledError()

    def _return_dataframe_type(self, dataframe, dataframe_type):
        if dataframe_type.lower() in ["default", "spark"]:
            return dataframe

        # Converting to pandas dataframe if return type is not spark
        if isinstance(dataframe, DataFrame):
            dataframe = dataframe.toPandas()

        if dataframe_type.lower() == "pandas":
            return dataframe
        if dataframe_type.lower() == "numpy":
            return dataframe.values
        if dataframe_type.lower() == "python":
            return dataframe.values.tolist()

        raise TypeError(
            "Dataframe type `{}` not supported on this platform.".format(dataframe_type)
        )
