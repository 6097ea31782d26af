"""Tests for the KotaError to HTTP response mapping."""

import json

import pytest

from kota.api.app import kota_error_handler
from kota.core.exceptions import (
    PersistenceError,
    SchemaValidationError,
    ToolNotFoundError,
)


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error, status",
    [
        (ToolNotFoundError("nope"), 404),
        (SchemaValidationError("t", {"a": "missing required argument"}), 422),
        (PersistenceError("s", "disk full"), 500),
    ],
)
async def test_status_follows_kind(error, status):
    response = await kota_error_handler(None, error)

    assert response.status_code == status
    assert json.loads(response.body) == error.to_result()
