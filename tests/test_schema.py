import copy
import pickle
from collections.abc import Callable

from vstruct.schema import MISSING, Nullable, Optional, Union, describe


def test_missing_is_falsy_singleton():
    assert not MISSING
    assert repr(MISSING) == "MISSING"
    assert copy.copy(MISSING) is MISSING
    assert copy.deepcopy(MISSING) is MISSING
    assert type(MISSING)() is MISSING


def test_missing_survives_pickling():
    assert pickle.loads(pickle.dumps(MISSING)) is MISSING


def test_combinators_hold_wrapped_nodes():
    assert Nullable(str).type is str
    assert Optional(int).type is int
    assert Union(str, float).types == (str, float)
    assert Union().types == ()


def test_combinators_compose():
    node = Nullable(Union(str, float))
    assert isinstance(node.type, Union)
    assert node.type.types == (str, float)


def test_combinators_are_not_mappings():
    # Tags cannot collide with object schema keys.
    node = Optional({"type": str})
    assert not isinstance(node, dict)
    assert node.type == {"type": str}


def test_describe():
    assert describe(str) == "str"
    assert describe(Callable) == "Callable"
    assert describe(None) == "None"
    assert describe(MISSING) == "undefined"
    assert describe([str]) == "[str]"
    assert describe(Nullable(int)) == "Nullable[int]"
    assert describe(Optional([bool])) == "Optional[[bool]]"
    assert describe(Union(str, float)) == "str, float"
    assert describe({"name": str, "age": int}) == "{name, age}"
    assert describe("literal") == "str"
