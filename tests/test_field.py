"""Tests for the umbrella_headers.field.Field facade."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from umbrella_headers.errors import FieldSyntaxError
from umbrella_headers.field import Field, FieldState
from umbrella_headers.fields import (
    ContentTypeField,
    MessageIdField,
    OptionalField,
    SubjectField,
    ToField,
    UnstructuredField,
)
from umbrella_headers.splitter import unfold


class TestConstruction:
    def test_combined_form_is_lazy(self):
        field = Field("Subject: =?UTF-8?B?SGVsbG8=?=")
        assert field.state is FieldState.UNPARSED
        assert field.name == "Subject"
        assert field.value == "Hello"
        assert field.state is FieldState.PARSED

    def test_combined_form_second_argument_is_charset(self):
        field = Field("Subject: Héllo", "iso-8859-1")
        assert field.charset == "iso-8859-1"
        assert field.to_s().startswith("=?iso-8859-1?B?")

    def test_combined_form_blank_second_argument(self):
        field = Field("Subject: hi", "  ")
        assert field.charset == "utf-8"
        assert field.value == "hi"

    def test_name_value_pair(self):
        field = Field("To", "Ann <ann@example.com>")
        assert isinstance(field.field, ToField)
        assert field.addresses == ["ann@example.com"]

    def test_bare_name(self):
        field = Field("Message-ID")
        assert isinstance(field.field, MessageIdField)
        assert "@" in field.message_id

    def test_name_canonicalized(self):
        assert Field("content-TYPE", "text/html").name == "Content-Type"
        assert Field("x-custom-header", "1").name == "x-custom-header"

    def test_bytes_input(self):
        field = Field(b"Subject: caf\xc3\xa9")
        assert field.value == "café"

    def test_structured_value(self):
        field = Field("Content-Type", ("text/plain", {"charset": "utf-8"}))
        assert isinstance(field.field, ContentTypeField)
        assert field.mime_type == "text/plain"
        assert field.to_s() == "text/plain; charset=utf-8"

    def test_datetime_value(self):
        field = Field("Date", datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        assert field.to_s() == "Thu, 02 Jan 2025 03:04:05 +0000"

    def test_folded_raw_text(self):
        field = Field("To: a@b.com,\r\n\tc@d.com")
        assert field.addresses == ["a@b.com", "c@d.com"]

    def test_unsplittable_raw_text(self):
        field = Field("Bad Name: x")
        assert field.name == "Bad Name"
        assert field.value == ""


class TestFallback:
    def test_bad_date_degrades(self):
        field = Field("Date: sometime last week")
        assert type(field.field) is UnstructuredField
        assert field.value == "sometime last week"
        assert field.to_s() == "sometime last week"
        assert field.errors[0].element == "DateField"

    def test_bad_address_degrades(self):
        field = Field("To", "not an address")
        assert type(field.field) is UnstructuredField
        assert field.to_s() == "not an address"
        assert len(field.errors) == 1

    def test_unknown_header_is_optional(self):
        field = Field("X-Mailer: Evolution 3.44")
        assert isinstance(field.field, OptionalField)
        assert field.errors == []


class TestValueAssignment:
    def test_setter_reparses(self):
        field = Field("Subject", "old")
        field.value = "new"
        assert field.value == "new"
        assert isinstance(field.field, SubjectField)

    def test_setter_rejects_bad_grammar(self):
        field = Field("Date", "Thu, 02 Jan 2025 03:04:05 +0000")
        with pytest.raises(FieldSyntaxError):
            field.value = "next tuesday"
        assert field.to_s() == "Thu, 02 Jan 2025 03:04:05 +0000"

    def test_update_is_lenient(self):
        field = Field("Subject", "hi")
        field.update("To", "nobody")
        assert field.name == "To"
        assert type(field.field) is UnstructuredField
        assert field.errors

    def test_update_changes_order(self):
        field = Field("X-Mailer", "1")
        field.update("received", "from a by b; Thu, 02 Jan 2025 03:04:05 +0000")
        assert field.name == "Received"
        assert field.field_order_id == 1

    def test_field_setter(self):
        field = Field("Subject: raw")
        field.field = SubjectField("replaced")
        assert field.state is FieldState.PARSED
        assert field.value == "replaced"


class TestRendering:
    def test_encoded_line(self):
        assert Field("Subject", "Hello").encoded() == "Subject: Hello\r\n"

    def test_encoded_non_ascii_subject(self):
        assert Field("Subject", "Grüße").encoded() == "Subject: =?utf-8?B?R3LDvMOfZQ==?=\r\n"

    def test_long_line_folded(self):
        words = " ".join(f"word{i}" for i in range(40))
        encoded = Field("Subject", words).encoded()
        lines = encoded.split("\r\n")[:-1]
        assert len(lines) > 1
        assert all(len(line) <= 78 for line in lines)
        assert unfold(encoded).strip() == f"Subject: {words}"

    def test_address_display_name(self):
        field = Field("To: =?UTF-8?B?SsO2cmc=?= <j@example.com>")
        assert field.display_names == ["Jörg"]
        assert field.decoded() == "Jörg <j@example.com>"
        assert field.to_s() == "=?utf-8?B?SsO2cmc=?= <j@example.com>"

    def test_str_is_wire_text(self):
        assert str(Field("Subject", "plain")) == "plain"

    def test_repr_before_and_after_parse(self):
        field = Field("Subject: hi")
        assert "unparsed" in repr(field)
        field.value
        assert "SubjectField" in repr(field)


class TestRepairOnParse:
    def test_raw_latin1_subject(self, latin1_detector):
        assert Field(b"Subject: Caf\xe9").value == "Café"

    def test_raw_latin1_attachment_name(self, latin1_detector):
        field = Field(b"Content-Disposition: attachment; filename=r\xe9sum\xe9.pdf")
        assert field.disposition_type == "attachment"
        assert field.filename == "résumé.pdf"
        assert field.to_s() == "attachment; filename*=utf-8'en'r%C3%A9sum%C3%A9.pdf"

    def test_uppercase_filename_key(self, latin1_detector):
        field = Field(b'Content-Disposition: attachment; FILENAME="r\xe9sum\xe9.pdf"')
        assert field.filename == "résumé.pdf"
        assert field.to_s() == "attachment; filename*=utf-8'en'r%C3%A9sum%C3%A9.pdf"

    def test_raw_name_parameter_in_disposition(self, latin1_detector):
        field = Field(b'Content-Disposition: inline; name="r\xe9sum\xe9"')
        assert field.filename == "résumé"
        assert field.to_s().isascii()

    def test_raw_content_type_parameter(self, latin1_detector):
        field = Field(b'Content-Type: text/plain; format="fl\xe9wed"')
        assert field.parameters["format"] == "fléwed"
        assert field.to_s().startswith("text/plain; format*=")
        assert field.to_s().isascii()

    def test_detected_with_real_detector(self):
        field = Field(b'Content-Disposition: attachment; filename="r\xe9sum\xe9.pdf"')
        assert field.filename == "résumé.pdf"
        assert field.to_s() == "attachment; filename*=utf-8'en'r%C3%A9sum%C3%A9.pdf"


class TestComparison:
    def test_equality_by_name(self):
        assert Field("to", "a@b.com") == Field("To", "c@d.com")
        assert Field("To", "a@b.com") != Field("Cc", "a@b.com")

    def test_hash_by_name(self):
        assert len({Field("TO", "a@b.com"), Field("to", "c@d.com")}) == 1

    def test_responsible_for(self):
        field = Field("Reply-To", "a@b.com")
        assert field.responsible_for("REPLY-TO")
        assert not field.responsible_for("To")
        assert field.same(Field("reply-to", "c@d.com"))

    def test_sorted_by_field_order(self, received_value):
        fields = [
            Field("X-Mailer", "m"),
            Field("Subject", "s"),
            Field("To", "a@b.com"),
            Field("Received", received_value),
        ]
        assert [f.name for f in sorted(fields)] == ["Received", "To", "Subject", "X-Mailer"]

    def test_ordering_operators(self):
        received = Field("Received: from a by b; Thu, 02 Jan 2025 03:04:05 +0000")
        subject = Field("Subject: s")
        assert received < subject
        assert subject > received
        assert received <= received
        assert subject >= received


class TestCapabilities:
    def test_unknown_capability(self):
        with pytest.raises(AttributeError):
            Field("Subject", "x").addresses

    def test_internal_method_not_forwarded(self):
        with pytest.raises(AttributeError):
            Field("To", "a@b.com").parse

    def test_private_attribute(self):
        with pytest.raises(AttributeError):
            Field("To", "a@b.com")._missing

    def test_received_capabilities(self, received_value):
        field = Field("Received", received_value)
        assert field.info == "from mx.example.com by mail.example.com"
        assert field.date_time == datetime(2025, 6, 2, 12, 0, tzinfo=timezone.utc)


class TestRoundTrip:
    @pytest.mark.parametrize(
        "name, value",
        [
            ("Subject", "Grüße aus Köln"),
            ("To", "Jörg Müller <j@example.com>, ann@example.com"),
            ("From", '"Lee, Ann" <ann@example.com>'),
            ("Date", "Thu, 02 Jan 2025 03:04:05 +0100"),
            ("Received", "from a by b; Thu, 02 Jan 2025 03:04:05 +0000"),
            ("Message-ID", "<abc.123@example.com>"),
            ("References", "<a@x.com> <b@y.com>"),
            ("Keywords", "finance, été"),
            ("Content-Type", ("text/plain", {"name": "été.txt", "charset": "utf-8"})),
            ("Content-Disposition", ("attachment", {"filename": "my file.txt"})),
            ("Content-Transfer-Encoding", "Base64"),
            ("MIME-Version", "1.0"),
        ],
    )
    def test_render_is_idempotent(self, name, value):
        rendered = Field(name, value).to_s()
        assert rendered.isascii()
        assert Field(name, rendered).to_s() == rendered

    def test_encoded_subject_example(self):
        field = Field("Subject: =?UTF-8?B?SGVsbG8=?=")
        assert field.value == "Hello"
        assert Field(field.encoded()).value == "Hello"


class TestFallbackSafety:
    @pytest.mark.parametrize(
        "line",
        [
            "Date: sometime\r\n last week",
            "To: not-an-address",
            "Content-Type: not a type",
            "Message-ID: no brackets here",
            "MIME-Version: x.y",
            "Received: no date here",
            "Content-Transfer-Encoding: uuencode",
        ],
    )
    def test_malformed_value_round_trips(self, line):
        field = Field(line)
        _, expected = line.split(":", 1)
        assert field.errors
        assert unfold(field.to_s()) == unfold(expected).strip()
