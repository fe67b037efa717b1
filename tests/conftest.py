"""Shared fixtures."""

import pytest
from bson import ObjectId

from docbridge.model.bridge import SerializationBridge


@pytest.fixture
def bridge():
    """A bridge with default settings."""
    return SerializationBridge()


@pytest.fixture
def object_id():
    return ObjectId("507f191e810c19729de860ea")
