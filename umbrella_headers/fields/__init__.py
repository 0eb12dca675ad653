"""Structured header field variants, one per known field name."""

from .address import (
    Address,
    AddressListField,
    BccField,
    CcField,
    FromField,
    ReplyToField,
    ResentBccField,
    ResentCcField,
    ResentFromField,
    ResentSenderField,
    ResentToField,
    ReturnPathField,
    SenderField,
    ToField,
)
from .base import CommonField, OptionalField, StructuredField, UnstructuredField
from .date import DateField, ReceivedField, ResentDateField
from .identifiers import (
    ContentIdField,
    InReplyToField,
    MessageIdField,
    ReferencesField,
    ResentMessageIdField,
)
from .mime import (
    ContentDispositionField,
    ContentLocationField,
    ContentTransferEncodingField,
    ContentTypeField,
    MimeVersionField,
)
from .parameters import ParameterList
from .text import CommentsField, ContentDescriptionField, KeywordsField, SubjectField

KNOWN_VARIANTS: tuple[type[CommonField], ...] = (
    ToField,
    CcField,
    BccField,
    MessageIdField,
    InReplyToField,
    ReferencesField,
    SubjectField,
    CommentsField,
    KeywordsField,
    DateField,
    FromField,
    SenderField,
    ReplyToField,
    ResentDateField,
    ResentFromField,
    ResentSenderField,
    ResentToField,
    ResentCcField,
    ResentBccField,
    ResentMessageIdField,
    ReturnPathField,
    ReceivedField,
    MimeVersionField,
    ContentTransferEncodingField,
    ContentDescriptionField,
    ContentDispositionField,
    ContentTypeField,
    ContentIdField,
    ContentLocationField,
)

__all__ = [
    "Address",
    "AddressListField",
    "BccField",
    "CcField",
    "CommentsField",
    "CommonField",
    "ContentDescriptionField",
    "ContentDispositionField",
    "ContentIdField",
    "ContentLocationField",
    "ContentTransferEncodingField",
    "ContentTypeField",
    "DateField",
    "FromField",
    "InReplyToField",
    "KNOWN_VARIANTS",
    "KeywordsField",
    "MessageIdField",
    "MimeVersionField",
    "OptionalField",
    "ParameterList",
    "ReceivedField",
    "ReferencesField",
    "ReplyToField",
    "ResentBccField",
    "ResentCcField",
    "ResentDateField",
    "ResentFromField",
    "ResentMessageIdField",
    "ResentSenderField",
    "ResentToField",
    "ReturnPathField",
    "SenderField",
    "StructuredField",
    "SubjectField",
    "ToField",
    "UnstructuredField",
]
