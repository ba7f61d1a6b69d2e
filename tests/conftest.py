"""
Pytest configuration and shared fixtures for jtok tests.

Provides immutable test cases from the JSON_checker corpus and a small
reference consumer that rebuilds values from a token stream, so token
output can be compared against the standard library json module.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

import pytest

import jtok
from jtok import Token
from jtok import TokenType


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None
    skip_reason: str = ""


FAIL_DOCS = [
    # https://json.org/JSON_checker/test/fail1.json
    '"A JSON payload should be an object or array, not a string."',
    # https://json.org/JSON_checker/test/fail2.json
    '["Unclosed array"',
    # https://json.org/JSON_checker/test/fail3.json
    '{unquoted_key: "keys must be quoted"}',
    # https://json.org/JSON_checker/test/fail4.json
    '["extra comma",]',
    # https://json.org/JSON_checker/test/fail5.json
    '["double extra comma",,]',
    # https://json.org/JSON_checker/test/fail6.json
    '[   , "<-- missing value"]',
    # https://json.org/JSON_checker/test/fail7.json
    '["Comma after the close"],',
    # https://json.org/JSON_checker/test/fail8.json
    '["Extra close"]]',
    # https://json.org/JSON_checker/test/fail9.json
    '{"Extra comma": true,}',
    # https://json.org/JSON_checker/test/fail10.json
    '{"Extra value after close": true} "misplaced quoted value"',
    # https://json.org/JSON_checker/test/fail11.json
    '{"Illegal expression": 1 + 2}',
    # https://json.org/JSON_checker/test/fail12.json
    '{"Illegal invocation": alert()}',
    # https://json.org/JSON_checker/test/fail13.json
    '{"Numbers cannot have leading zeroes": 013}',
    # https://json.org/JSON_checker/test/fail14.json
    '{"Numbers cannot be hex": 0x14}',
    # https://json.org/JSON_checker/test/fail15.json
    '["Illegal backslash escape: \\x15"]',
    # https://json.org/JSON_checker/test/fail16.json
    "[\\naked]",
    # https://json.org/JSON_checker/test/fail17.json
    '["Illegal backslash escape: \\017"]',
    # https://json.org/JSON_checker/test/fail18.json
    '[[[[[[[[[[[[[[[[[[[["Too deep"]]]]]]]]]]]]]]]]]]]]',
    # https://json.org/JSON_checker/test/fail19.json
    '{"Missing colon" null}',
    # https://json.org/JSON_checker/test/fail20.json
    '{"Double colon":: null}',
    # https://json.org/JSON_checker/test/fail21.json
    '{"Comma instead of colon", null}',
    # https://json.org/JSON_checker/test/fail22.json
    '["Colon instead of comma": false]',
    # https://json.org/JSON_checker/test/fail23.json
    '["Bad value", truth]',
    # https://json.org/JSON_checker/test/fail24.json
    "['single quote']",
    # https://json.org/JSON_checker/test/fail25.json
    '["\ttab\tcharacter\tin\tstring\t"]',
    # https://json.org/JSON_checker/test/fail26.json
    '["tab\\   character\\   in\\  string\\  "]',
    # https://json.org/JSON_checker/test/fail27.json
    '["line\nbreak"]',
    # https://json.org/JSON_checker/test/fail28.json
    '["line\\\nbreak"]',
    # https://json.org/JSON_checker/test/fail29.json
    "[0e]",
    # https://json.org/JSON_checker/test/fail30.json
    "[0e+]",
    # https://json.org/JSON_checker/test/fail31.json
    "[0e+-1]",
    # https://json.org/JSON_checker/test/fail32.json
    '{"Comma instead if closing brace": true,',
    # https://json.org/JSON_checker/test/fail33.json
    '["mismatch"}',
    # https://code.google.com/archive/p/simplejson/issues/3
    '["A\u001fZ control characters in string"]',
]

# Cases the tokenizer accepts on purpose
_FAIL_SKIPS = {
    1: "a bare string is a complete top-level value",
    18: "nesting is unlimited unless max_depth is set",
}

FAIL_CASES = [
    JsonTestCase(
        description=f"fail{idx + 1}.json",
        input_data=doc,
        should_fail=True,
        skip_reason=_FAIL_SKIPS.get(idx + 1, ""),
    )
    for idx, doc in enumerate(FAIL_DOCS)
]

PASS1 = """[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "e": 0.123456789e-12,
        "E": 1.234567890E+34,
        "":  23456789012E66,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}",
        "quotes": "&#34; \\u0022 %22 0x22 034 &#x22;",
        "\\/\\\\\\"\\uCAFE\\uBABE\\uAB98\\uFCDE\\ubcda\\uef4A\\b\\f\\n\\r\\t`1~!@#$%^&*()_+-=[]{}|;:',./<>?"
: "A key can be any string"
    },
    0.5 ,98.6
,
99.44
,

1066,
1e1,
0.1e1,
1e-1,
1e00,2e+00,2e-00
,"rosebud"]"""

PASS_CASES = [
    JsonTestCase("pass1.json - complex nested structure", PASS1),
    JsonTestCase(
        "pass2.json - deep nesting",
        '[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
    ),
    JsonTestCase(
        "pass3.json - simple object",
        '{"JSON Test Pattern pass3": {"The outermost value": '
        '"must be an object or array.", "In this test": "It is an object."}}',
    ),
]


def collect(text: str, **kwargs: Any) -> list[Token]:
    """Drains a token stream over text into a list."""
    return list(jtok.tokenize(text, **kwargs))


def collect_prefix(text: str, **kwargs: Any) -> list[Token]:
    """Drains a token stream, keeping the tokens emitted before a fault."""
    tokens: list[Token] = []
    stream = jtok.tokenize(text, **kwargs)
    try:
        for token in stream:
            tokens.append(token)
    except jtok.JSONDecodeError:
        pass
    return tokens


def build_value(tokens: Iterator[Token] | list[Token]) -> Any:
    """
    Rebuilds one Python value from a well-formed token sequence.

    Test-only consumer mirroring what json.loads returns, with every number
    as a float.
    """
    it = iter(tokens)
    return _build(next(it), it)


def _build(token: Token, it: Iterator[Token]) -> Any:
    if token.type is TokenType.OBJECT_START:
        obj: dict[str, Any] = {}
        for key in it:
            if key.type is TokenType.OBJECT_END:
                return obj
            obj[str(key.value)] = _build(next(it), it)
        raise AssertionError("unbalanced object")
    if token.type is TokenType.ARRAY_START:
        arr: list[Any] = []
        for item in it:
            if item.type is TokenType.ARRAY_END:
                return arr
            arr.append(_build(item, it))
        raise AssertionError("unbalanced array")
    if token.type is TokenType.TRUE:
        return True
    if token.type is TokenType.FALSE:
        return False
    if token.type is TokenType.NULL:
        return None
    return token.value


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must fail tokenizing per JSON specification.

    These cases from json.org JSON_checker ensure strict standards
    compliance and proper error handling for malformed JSON.
    """
    return FAIL_CASES


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides JSON strings that must tokenize successfully.
    """
    return PASS_CASES


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides basic JSON value test cases for fundamental tokenizing.

    Expected output is the token list for each document.
    """
    return [
        JsonTestCase("null value", "null", False, [jtok.NULL]),
        JsonTestCase("true boolean", "true", False, [jtok.TRUE]),
        JsonTestCase("false boolean", "false", False, [jtok.FALSE]),
        JsonTestCase("integer", "42", False, [Token.number(42.0)]),
        JsonTestCase("negative integer", "-17", False, [Token.number(-17.0)]),
        JsonTestCase("float", "3.14", False, [Token.number(3.14)]),
        JsonTestCase("empty string", '""', False, [Token.string("")]),
        JsonTestCase(
            "simple string", '"hello"', False, [Token.string("hello")]
        ),
        JsonTestCase(
            "empty array", "[]", False, [jtok.ARRAY_START, jtok.ARRAY_END]
        ),
        JsonTestCase(
            "empty object", "{}", False, [jtok.OBJECT_START, jtok.OBJECT_END]
        ),
        JsonTestCase(
            "simple array",
            "[1, 2, 3]",
            False,
            [
                jtok.ARRAY_START,
                Token.number(1.0),
                Token.number(2.0),
                Token.number(3.0),
                jtok.ARRAY_END,
            ],
        ),
        JsonTestCase(
            "simple object",
            '{"key": "value"}',
            False,
            [
                jtok.OBJECT_START,
                Token.string("key"),
                Token.string("value"),
                jtok.OBJECT_END,
            ],
        ),
    ]
