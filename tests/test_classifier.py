"""
Unit tests for request method classification
"""

import pytest

from core.classifier import MethodClassifier
from core.headers import CORS_HEADERS


@pytest.fixture
def classifier():
    return MethodClassifier()


@pytest.mark.parametrize("method", ["GET", "get", "HEAD", "head"])
def test_read_methods_are_forwarded(classifier, method):
    decision = classifier.classify(method)
    assert decision.forward
    assert decision.method == method.upper()


@pytest.mark.parametrize("method", [None, ""])
def test_missing_method_defaults_to_get(classifier, method):
    decision = classifier.classify(method)
    assert decision.forward
    assert decision.method == "GET"


@pytest.mark.parametrize("method", ["OPTIONS", "options"])
def test_preflight_short_circuit(classifier, method):
    decision = classifier.classify(method)
    assert not decision.forward
    assert decision.response.status_code == 204
    assert decision.response.headers == dict(CORS_HEADERS)
    assert decision.response.body == ""


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE", "TRACE"])
def test_other_methods_rejected(classifier, method):
    decision = classifier.classify(method)
    assert not decision.forward
    assert decision.response.status_code == 405
    assert decision.response.headers["Allow"] == "GET,HEAD,OPTIONS"
    assert decision.response.headers["Access-Control-Allow-Origin"] == "*"
    assert decision.response.body == ""
