"""
Tests for message catalogs and Accept-Language handling.
"""

import pytest

from shared.i18n import resolve_locale, translate
from shared.i18n.translator import load_catalog


def _keys(node, prefix=""):
    for name, value in node.items():
        path = f"{prefix}{name}"
        if isinstance(value, dict):
            yield from _keys(value, f"{path}.")
        else:
            yield path


class TestTranslate:
    def test_english(self):
        assert translate("errors.not_found.table", "en") == "Table not found"

    def test_thai_is_default(self):
        assert translate("errors.not_found.table") == "ไม่พบโต๊ะ"

    def test_unknown_locale_falls_back(self):
        assert translate("errors.not_found.table", "ja") == "ไม่พบโต๊ะ"

    def test_placeholders(self):
        message = translate("errors.forbidden.role", "en", roles="ADMIN, MANAGER")
        assert message == "Requires role: ADMIN, MANAGER"

    def test_missing_placeholder_is_left_visible(self):
        assert translate("errors.forbidden.role", "en") == "Requires role: {{roles}}"

    def test_missing_key_returns_key(self):
        assert translate("errors.no_such_message", "en") == "errors.no_such_message"

    def test_branch_key_is_not_a_message(self):
        assert translate("errors.not_found", "en") == "errors.not_found"

    def test_catalogs_have_the_same_keys(self):
        assert set(_keys(load_catalog("th"))) == set(_keys(load_catalog("en")))


class TestResolveLocale:
    @pytest.mark.parametrize(
        "header,expected",
        [
            (None, "th"),
            ("", "th"),
            ("en", "en"),
            ("en-US,en;q=0.9", "en"),
            ("th-TH", "th"),
            ("fr, en;q=0.5", "en"),
            ("th;q=0.2, en;q=0.8", "en"),
            ("de, ja", "th"),
            ("en;q=abc, th", "th"),
        ],
    )
    def test_resolve(self, header, expected):
        assert resolve_locale(header) == expected

    def test_error_responses_follow_header(self, client, cashier_headers):
        english = client.get("/api/tables/999", headers={**cashier_headers, "Accept-Language": "en"})
        thai = client.get("/api/tables/999", headers=cashier_headers)
        assert english.status_code == thai.status_code == 404
        assert english.json()["detail"] == "Table not found"
        assert thai.json()["detail"] == "ไม่พบโต๊ะ"
