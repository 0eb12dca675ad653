"""Tests for the date, trace, identifier and free-text field variants."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from umbrella_headers.errors import FieldParseError
from umbrella_headers.fields import (
    ContentIdField,
    DateField,
    InReplyToField,
    KeywordsField,
    MessageIdField,
    ReceivedField,
    ReferencesField,
    ResentDateField,
    SubjectField,
    UnstructuredField,
)
from umbrella_headers.fields.date import parse_date_time
from umbrella_headers.fields.identifiers import extract_msg_ids, make_msg_id


class TestDateField:
    def test_parse(self):
        field = DateField("Thu, 02 Jan 2025 03:04:05 +0100")
        assert field.date_time == datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=1)))
        assert field.render() == "Thu, 02 Jan 2025 03:04:05 +0100"

    def test_datetime_value(self):
        field = ResentDateField(datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        assert field.render() == "Thu, 02 Jan 2025 03:04:05 +0000"

    def test_blank_is_now(self):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        field = DateField(None)
        assert field.date_time.tzinfo is not None
        assert field.date_time >= before

    def test_invalid(self):
        with pytest.raises(FieldParseError):
            DateField("the day after tomorrow")

    def test_unsupported_type(self):
        with pytest.raises(FieldParseError):
            DateField(20250102)

    def test_parse_date_time_error(self):
        with pytest.raises(ValueError):
            parse_date_time("yesterday")


class TestReceivedField:
    def test_parse(self, received_value):
        field = ReceivedField(received_value)
        assert field.info == "from mx.example.com by mail.example.com"
        assert field.date_time == datetime(2025, 6, 2, 12, 0, tzinfo=timezone.utc)
        assert field.render() == received_value

    def test_semicolon_in_info(self):
        field = ReceivedField("from a (b; c) by d; Mon, 02 Jun 2025 12:00:00 +0000")
        assert field.info == "from a (b; c) by d"

    def test_missing_date(self):
        with pytest.raises(FieldParseError, match="missing ';'"):
            ReceivedField("from a by b")

    def test_bad_date(self):
        with pytest.raises(FieldParseError):
            ReceivedField("from a by b; not a date")

    def test_blank(self):
        assert ReceivedField("").render() == ""


class TestMessageIds:
    def test_extract(self):
        assert extract_msg_ids("<a@x> (comment) <b@y>") == (["a@x", "b@y"], "")
        assert extract_msg_ids("junk <a@x>") == (["a@x"], "junk")

    def test_references(self):
        field = ReferencesField("<a@x.com>\r\n <b@y.com>")
        assert field.message_ids == ["a@x.com", "b@y.com"]
        assert field.render() == "<a@x.com> <b@y.com>"

    def test_in_reply_to_list(self):
        field = InReplyToField(["a@x.com", "<b@y.com>"])
        assert field.message_ids == ["a@x.com", "b@y.com"]

    def test_bare_id_accepted(self):
        assert MessageIdField("abc@example.com").message_id == "abc@example.com"

    def test_stray_text_rejected(self):
        with pytest.raises(FieldParseError, match="outside msg-id"):
            ReferencesField("<a@x.com> junk")

    def test_id_without_at_rejected(self):
        with pytest.raises(FieldParseError):
            ReferencesField("<abc>")

    def test_message_id_single(self):
        with pytest.raises(FieldParseError, match="exactly one"):
            MessageIdField("<a@x.com> <b@y.com>")

    def test_message_id_generated(self):
        field = MessageIdField(None)
        assert field.render().startswith("<")
        assert "@" in field.message_id
        assert MessageIdField(None).message_id != field.message_id

    def test_make_msg_id(self):
        msg_id = make_msg_id()
        assert "@" in msg_id
        assert not msg_id.startswith("<")

    def test_content_id(self):
        field = ContentIdField("<part1.abc@example.com>")
        assert field.content_id == "part1.abc@example.com"
        assert field.name == "Content-ID"


class TestTextFields:
    def test_subject_decoded(self):
        field = SubjectField("=?UTF-8?B?SGVsbG8=?= world")
        assert field.value == "Hello world"
        assert field.render() == "=?UTF-8?B?SGVsbG8=?= world"

    def test_subject_non_ascii_encoded(self):
        assert SubjectField("Grüße", "utf-8").render() == "=?utf-8?B?R3LDvMOfZQ==?="

    def test_unstructured_accepts_anything(self):
        field = UnstructuredField(12345)
        assert field.value == "12345"
        assert UnstructuredField(None).render() == ""

    def test_keywords(self):
        field = KeywordsField('finance, "Q3 report", =?UTF-8?B?w6l0w6k=?=')
        assert field.keywords == ["finance", "Q3 report", "été"]
        assert field.render() == "finance, Q3 report, =?utf-8?B?w6l0w6k=?="

    def test_keywords_list(self):
        assert KeywordsField(["a", "b"]).decoded() == "a, b"

    def test_keywords_blank(self):
        assert KeywordsField("").keywords == []

    def test_keywords_empty_phrase(self):
        with pytest.raises(FieldParseError, match="empty phrase"):
            KeywordsField("a,,b")
