import pytest

from vstruct import Nullable, Optional, Struct, StructBase, VStruct, is_proxy, unwrap
from vstruct.exceptions import ValidationError


def test_struct_applies_defaults_then_data():
    Vec2 = Struct({"x": 0, "y": 0}, name="Vec2")
    vec = Vec2({"x": 10})
    assert vec.x == 10
    assert vec.y == 0
    assert repr(vec) == "Vec2(x=10, y=0)"
    assert isinstance(vec, StructBase)


def test_struct_keyword_fields_win():
    Vec2 = Struct({"x": 0, "y": 0})
    vec = Vec2({"x": 1}, x=2)
    assert vec.as_dict() == {"x": 2, "y": 0}


def test_struct_defaults_are_not_shared():
    Bag = Struct({"items": []})
    first, second = Bag(), Bag()
    first.items.append(1)
    assert second.items == []


def test_struct_accepts_attribute_objects():
    Vec2 = Struct({"x": 0, "y": 0})
    copy = Vec2(Vec2(x=3))
    assert copy.x == 3


def test_struct_rejects_scalars():
    Vec2 = Struct({"x": 0})
    with pytest.raises(TypeError):
        Vec2(5)


def test_struct_equality():
    Vec2 = Struct({"x": 0, "y": 0})
    assert Vec2(x=1) == Vec2(x=1)
    assert Vec2(x=1) != Vec2(x=2)


USER_SCHEMA = {
    "username": str,
    "email": str,
    "age": Nullable(float),
    "nick": Optional(str),
    "tags": [str],
}


def make_user_class(**kwargs):
    return VStruct(USER_SCHEMA, {"username": "anon", "age": None, "tags": []}, name="User", **kwargs)


def test_vstruct_validates_and_returns_proxy():
    User = make_user_class()
    user = User({"email": "a@b.c"})
    assert is_proxy(user)
    assert isinstance(unwrap(user), User)
    assert user.username == "anon"
    assert user.email == "a@b.c"


def test_vstruct_construction_failure_always_raises():
    User = make_user_class(quiet=True)
    with pytest.raises(ValidationError) as excinfo:
        User({"email": 5})
    assert excinfo.value.path == "/email"
    with pytest.raises(ValidationError) as excinfo:
        User()
    assert "Missing required key 'email'" in str(excinfo.value)


def test_vstruct_strict_writes():
    User = make_user_class()
    user = User(email="a@b.c")
    user.nick = "z"
    user.tags.append("t")
    assert unwrap(user).tags == ["t"]
    with pytest.raises(ValidationError):
        user.age = "old"
    assert user.age is None


def test_vstruct_quiet_writes():
    User = make_user_class(quiet=True)
    user = User(email="a@b.c")
    user.age = "old"
    user.tags.append(3)
    assert user.age is None
    assert user.tags == []


def test_vstruct_instances_have_separate_caches():
    User = make_user_class()
    shared_tags = ["t"]
    first = User(email="a", tags=shared_tags)
    second = User(email="b", tags=shared_tags)
    assert first.tags is not second.tags
    assert first.tags == second.tags


def test_vstruct_quiet_is_positional():
    Point = VStruct({"x": int}, {"x": 0}, True)
    point = Point()
    point.x = "no"
    assert point.x == 0


def test_vstruct_instance_satisfies_its_class_leaf():
    Member = VStruct({"name": str}, name="Member")
    Team = VStruct({"lead": Member, "size": int}, {"size": 1}, name="Team")
    lead = Member(name="a")
    assert isinstance(lead, Member)
    assert isinstance(lead, StructBase)

    team = Team(lead=lead)
    assert team.lead is lead
    team.lead.name = "b"
    with pytest.raises(ValidationError):
        team.lead.name = 1
    assert lead.name == "b"

    team.lead = Member(name="c")
    assert unwrap(team).lead.name == "c"
    with pytest.raises(ValidationError) as excinfo:
        team.lead.name = 2
    assert excinfo.value.path == "/lead/name"
    with pytest.raises(ValidationError) as excinfo:
        team.lead = {"name": "d"}
    assert "Expected Member but got dict" in str(excinfo.value)


def test_vstruct_construction_rejects_wrong_struct_class():
    Member = VStruct({"name": str}, name="Member")
    Guest = VStruct({"name": str}, name="Guest")
    Team = VStruct({"lead": Member}, name="Team")
    with pytest.raises(ValidationError) as excinfo:
        Team(lead=Guest(name="a"))
    assert excinfo.value.path == "/lead"
