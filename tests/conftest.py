"""
Pytest configuration and shared fixtures
"""

import json
from unittest.mock import Mock

import pytest

GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("


def gviz_wrap(payload) -> str:
    """Frame a payload the way the gviz endpoint does"""
    return GVIZ_PREFIX + json.dumps(payload) + ");"


def make_response(text: str, error: Exception = None) -> Mock:
    """Mock httpx response with the given body"""
    response = Mock()
    response.text = text
    response.raise_for_status = Mock()
    if error is not None:
        response.raise_for_status.side_effect = error
    return response


@pytest.fixture
def sample_payload():
    """gviz payload with four typed columns and three rows"""
    return {
        "version": "0.6",
        "reqId": "0",
        "status": "ok",
        "table": {
            "cols": [
                {"id": "A", "label": "name", "type": "string"},
                {"id": "B", "label": "salary", "type": "number"},
                {"id": "C", "label": "active", "type": "boolean"},
                {"id": "D", "label": "hired", "type": "datetime"},
            ],
            "rows": [
                {"c": [{"v": "Alice"}, {"v": 120000}, {"v": True}, {"v": "Date(2020,0,15,9,30,0)"}]},
                {"c": [{"v": "Bob"}, {"v": 95000.5}, {"v": False}, {"v": "Date(2021,5,1,0,0,0)"}]},
                {"c": [{"v": "Charlie"}, None, {"v": True}, {"v": "2022-03-10 08:00:00"}]},
            ],
        },
    }


@pytest.fixture
def sample_body(sample_payload):
    """sample_payload framed by the gviz wrapper"""
    return gviz_wrap(sample_payload)


@pytest.fixture
def wrap():
    """Helper that frames a payload with the gviz wrapper"""
    return gviz_wrap


@pytest.fixture
def response():
    """Factory for mock httpx responses"""
    return make_response
