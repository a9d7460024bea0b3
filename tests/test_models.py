"""
Unit tests for result types: failure equality and messages, and the
FieldErrors display helpers.
"""

from fieldrules import CyclicRecordError, FieldErrors, UndefinedRuleError, ValidationFailure


class TestFailures:
    def test_undefined_rule_message_quotes_name(self) -> None:
        err = UndefinedRuleError("bo\"gus")
        assert err.message == 'undefined validator: "bo\\"gus"'
        assert err.rule == 'bo"gus'
        assert isinstance(err, ValidationFailure)

    def test_equality_by_type_and_message(self) -> None:
        assert UndefinedRuleError("a") == UndefinedRuleError("a")
        assert UndefinedRuleError("a") != UndefinedRuleError("b")
        assert ValidationFailure('undefined validator: "a"') != UndefinedRuleError("a")

    def test_cyclic_record_message(self) -> None:
        class Node:
            pass

        err = CyclicRecordError("next", Node)
        assert "next" in str(err)
        assert "Node" in str(err)
        assert err.record_type is Node


class TestFieldErrors:
    def test_is_a_dict(self) -> None:
        errors = FieldErrors(A="bad")
        assert errors == {"A": "bad"}
        assert repr(errors) == "FieldErrors({'A': 'bad'})"

    def test_flatten_uses_dotted_paths(self) -> None:
        errors = FieldErrors(
            name="required",
            address=FieldErrors(zip_code="too short", geo=FieldErrors(lat="range")),
        )
        assert errors.flatten() == {
            "name": "required",
            "address.zip_code": "too short",
            "address.geo.lat": "range",
        }

    def test_to_dict_stringifies_leaves(self) -> None:
        errors = FieldErrors(
            A=UndefinedRuleError("bogus"),
            B=ValueError("bad value"),
            C=FieldErrors(D="plain"),
        )
        result = errors.to_dict()
        assert result == {
            "A": 'undefined validator: "bogus"',
            "B": "bad value",
            "C": {"D": "plain"},
        }
        assert type(result["C"]) is dict
