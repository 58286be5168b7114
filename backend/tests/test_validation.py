"""Request validation helpers."""

from decimal import Decimal

import pytest
from werkzeug.datastructures import MultiDict

from tillpoint.validation import (
    FieldSpec,
    ValidationError,
    parse_filter_id,
    parse_pagination,
    validate_payload,
)

FIELDS = (
    FieldSpec("name", required=True, max_length=10),
    FieldSpec("qty", kind="int", minimum=1),
    FieldSpec("amount", kind="decimal", minimum=0),
)


def _messages(**kwargs):
    with pytest.raises(ValidationError) as exc:
        validate_payload(**kwargs)
    return exc.value.messages


class TestValidatePayload:

    def test_cleans_and_strips(self):
        cleaned = validate_payload(
            payload={"name": "  Tea ", "qty": "3", "amount": 1.1, "extra": "ignored"},
            fields=FIELDS,
            partial=False,
        )

        assert cleaned == {"name": "Tea", "qty": 3, "amount": Decimal("1.1")}

    def test_partial_skips_required(self):
        assert validate_payload(payload={"qty": 2}, fields=FIELDS, partial=True) == {"qty": 2}

    def test_null_is_not_provided(self):
        assert validate_payload(payload={"name": None}, fields=FIELDS, partial=True) == {}

    @pytest.mark.parametrize(
        "payload,message",
        [
            ({"name": ""}, "name cannot be blank"),
            ({"name": "x" * 11}, "name exceeds max length 10"),
            ({"name": 5}, "name must be a string"),
            ({"qty": True}, "qty must be an integer"),
            ({"qty": "1e3"}, "qty must be a plain integer (scientific notation not allowed)"),
            ({"qty": "2.0"}, "qty must be an integer (no decimals)"),
            ({"amount": "abc"}, "amount must be a number"),
            ({"amount": "NaN"}, "amount must be a number"),
            ({"amount": "1000000000000"}, "amount cannot exceed 999999999999.99"),
        ],
    )
    def test_rejections(self, payload, message):
        assert _messages(payload=payload, fields=FIELDS, partial=True) == [message]

    def test_all_problems_reported_together(self):
        messages = _messages(payload={"qty": 0, "amount": -1}, fields=FIELDS, partial=False)

        assert messages == ["name is required", "qty must be >= 1", "amount must be >= 0"]


class TestParsePagination:

    def test_valid(self):
        assert parse_pagination(MultiDict({"skip": "2", "limit": "20"})) == (2, 20)

    def test_both_missing(self):
        with pytest.raises(ValidationError) as exc:
            parse_pagination(MultiDict())

        assert exc.value.messages == ["skip is required", "limit is required"]


class TestParseFilterId:

    def test_absent_or_empty_means_no_filter(self):
        assert parse_filter_id(MultiDict(), "category_id") == 0
        assert parse_filter_id(MultiDict({"category_id": ""}), "category_id") == 0

    def test_valid(self):
        assert parse_filter_id(MultiDict({"category_id": "7"}), "category_id") == 7

    @pytest.mark.parametrize("raw, message", [
        ("abc", "category_id must be an integer"),
        ("1.5", "category_id must be an integer (no decimals)"),
        ("1e3", "category_id must be a plain integer (scientific notation not allowed)"),
        ("0", "category_id must be >= 1"),
        ("-2", "category_id must be >= 1"),
    ])
    def test_rejected(self, raw, message):
        with pytest.raises(ValidationError) as exc:
            parse_filter_id(MultiDict({"category_id": raw}), "category_id")

        assert exc.value.messages == [message]
