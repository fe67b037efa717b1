"""Tests for partial model shapes and their field descriptors."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import pytest
from bson import ObjectId
from pydantic import ValidationError

from docbridge.model.partial import (
    ID_FIELD,
    FieldKind,
    HasIdentity,
    IdentifiedModel,
    ObjectIdStr,
    PartialModel,
    describe_shape,
    is_identified,
    required_keys,
)

OID_HEX = "507f191e810c19729de860ea"


class Address(PartialModel):
    city: str
    landlord: Optional[ObjectIdStr] = None


class Profile(IdentifiedModel):
    name: str
    created: Optional[datetime] = None
    owner: Optional[ObjectIdStr] = None
    friends: List[ObjectIdStr] = []
    address: Optional[Address] = None
    score: int = 0


class Email(PartialModel):
    email: str


class Payment(PartialModel):
    amount: Decimal
    reference: Optional[uuid.UUID] = None


class Category(PartialModel):
    name: str
    parent: Optional["Category"] = None
    children: List["Category"] = []


def test_reserved_identity_field():
    """Every identified shape shares the same reserved field name."""
    assert ID_FIELD == "_id"
    assert Profile.ID == ID_FIELD


def test_identity_accepts_native_identifier():
    """A native ObjectId is stored in its canonical hex form."""
    profile = Profile(_id=ObjectId(OID_HEX), name="a")
    assert profile.model_id() == OID_HEX
    assert isinstance(profile, HasIdentity)


def test_identity_is_mandatory():
    """Identified shapes reject missing or empty identities."""
    with pytest.raises(ValidationError):
        Profile(name="a")
    with pytest.raises(ValidationError):
        Profile(_id="", name="a")


def test_identity_is_only_read_from_reserved_field():
    """A plain ``id`` key does not satisfy the identity capability."""
    with pytest.raises(ValidationError):
        Profile.model_validate({"id": OID_HEX, "name": "a"})


def test_models_are_immutable():
    """Partial models are values."""
    email = Email(email="a@example.com")
    with pytest.raises(ValidationError):
        email.email = "b@example.com"


def test_capability_checks():
    """Only identified shapes claim the identity capability."""
    assert is_identified(Profile)
    assert not is_identified(Email)
    assert not is_identified(object)
    assert not isinstance(Email(email="a@example.com"), HasIdentity)


def test_describe_shape():
    """Descriptors classify fields for the inverse encoding rule."""
    fields = {d.name: d for d in describe_shape(Profile)}

    assert fields["id"].key == "_id"
    assert fields["id"].kind is FieldKind.IDENTIFIER
    assert fields["id"].required
    assert fields["name"].kind is FieldKind.VALUE
    assert fields["created"].kind is FieldKind.DATETIME
    assert not fields["created"].required
    assert fields["owner"].kind is FieldKind.IDENTIFIER
    assert fields["friends"].kind is FieldKind.IDENTIFIER
    assert fields["friends"].many
    assert fields["address"].kind is FieldKind.MODEL
    assert [d.key for d in fields["address"].fields] == ["city", "landlord"]
    assert fields["address"].fields[1].kind is FieldKind.IDENTIFIER
    assert fields["score"].kind is FieldKind.VALUE


def test_describe_shape_is_cached():
    """Descriptors are computed once per shape."""
    assert describe_shape(Profile) is describe_shape(Profile)


def test_describe_shape_rejects_non_shapes():
    """Only PartialModel subclasses have descriptors."""
    with pytest.raises(TypeError):
        describe_shape(dict)


def test_required_keys():
    """Required keys use record field names."""
    assert required_keys(Profile) == ("_id", "name")
    assert required_keys(Address) == ("city",)


def test_describe_decimal_and_uuid_fields():
    """Decimal and UUID fields get their own kinds."""
    fields = {d.name: d for d in describe_shape(Payment)}
    assert fields["amount"].kind is FieldKind.DECIMAL
    assert fields["reference"].kind is FieldKind.UUID


def test_describe_self_referencing_shape():
    """Nested descriptors resolve lazily, so a shape may contain itself."""
    fields = {d.name: d for d in describe_shape(Category)}

    assert fields["parent"].kind is FieldKind.MODEL
    assert fields["parent"].shape is Category
    assert fields["children"].many
    assert fields["children"].fields is describe_shape(Category)
    assert describe_shape(Email)[0].fields == ()
