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
import logging

from fsops.client import exceptions, external, hopsworks


_logger = logging.getLogger(__name__)
_client = None

_CLIENT_TYPES = {"hopsworks": hopsworks.Client, "external": external.Client}


def init(client_type, **kwargs):
    """Create the process-wide client once, later calls keep the existing client.

    `kwargs` are the connection settings of the external client, the internal
    client reads everything from its environment.
    """
    global _client
    if _client:
        _logger.info("Found initialized Hopsworks client, skipping initialization.")
        return
    try:
        client_cls = _CLIENT_TYPES[client_type]
    except KeyError:
        raise ValueError("Unknown client type `{}`.".format(client_type)) from None
    _logger.info("Initializing %s client", client_type)
    _client = client_cls(**kwargs)


def get_instance():
    if _client:
        return _client
    raise exceptions.FeatureStoreException(
        "Couldn't find client. Try reconnecting to Hopsworks."
    )


def stop():
    global _client
    _logger.info("Closing Hopsworks client")
    if _client:
        _client._close()
    _client = None
