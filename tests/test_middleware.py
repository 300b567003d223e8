"""
Tests for request logging helpers
"""

import pytest

from serverlist.middleware import operation_name_from_document, sanitize_query_params


class TestSanitizeQueryParams:
    def test_redacts_sensitive_keys(self):
        params = {"code": "oauth-code", "refresh_token": "abc", "page": "2"}

        assert sanitize_query_params(params) == {
            "code": "[REDACTED]",
            "refresh_token": "[REDACTED]",
            "page": "2",
        }


class TestOperationName:
    def test_explicit_name_wins(self):
        assert operation_name_from_document("Vote", "mutation Other { vote(id: 1) }") == "Vote"

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("mutation CreateServer { createServer }", "mutation:CreateServer"),
            ("query Servers { servers { id } }", "Servers"),
            ("{ me { id } }", "unnamed_operation"),
            ("query IntrospectionQuery { __schema { types { name } } }", "__introspection"),
        ],
    )
    def test_from_document(self, query, expected):
        assert operation_name_from_document(None, query) == expected

    def test_no_query(self):
        assert operation_name_from_document(None, None) is None
