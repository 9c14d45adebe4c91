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

import functools


def not_connected(fn):
    """Only allow `fn` while the connection is closed, e.g. connection setters."""

    @functools.wraps(fn)
    def if_not_connected(inst, *args, **kwargs):
        if inst._connected:
            raise HopsworksConnectionError(fn.__name__)
        return fn(inst, *args, **kwargs)

    return if_not_connected


def connected(fn):
    """Only allow `fn` on an open connection or client."""

    @functools.wraps(fn)
    def if_connected(inst, *args, **kwargs):
        if not inst._connected:
            raise NoHopsworksConnectionError(fn.__name__)
        return fn(inst, *args, **kwargs)

    return if_connected


class FeatureStoreConnectionStateError(Exception):
    """Base class for operations invoked in the wrong connection state."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__("Cannot call `{}`: {}".format(operation, message))


class HopsworksConnectionError(FeatureStoreConnectionStateError):
    """Raised when connection attributes are changed while the connection is open."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            operation,
            "the connection is in use, close it before changing its settings.",
        )


class NoHopsworksConnectionError(FeatureStoreConnectionStateError):
    """Raised when the feature store is accessed through a closed connection."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            operation,
            "the connection is not active, connect before reading feature groups.",
        )
