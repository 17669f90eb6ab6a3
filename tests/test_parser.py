import logging
import textwrap

import pytest

from jsongenpy.diagnostics import (
    DuplicateDefinitionError,
    InvalidArrayWidthError,
    LexicalError,
    SchemaError,
    SchemaSyntaxError,
    UnknownTypeError,
)
from jsongenpy.lexer import Lexer, iter_tokens
from jsongenpy.parser import (
    ParseMode,
    Parser,
    ParserOptions,
    ParserState,
    ParseSession,
    TokenSource,
    parse_schema,
    parse_schema_file_contents,
    parse_tokens,
)
from jsongenpy.schema import Field, FieldType, SymbolTable
from jsongenpy.text import Position
from tests._shared_cases import ALL_SCHEMA_CASES, SchemaCase, case_id, case_source


def _assert_error(
    source: str,
    error_type: type[SchemaError],
    *,
    code: str,
    position: tuple[int, int],
    message: str | None = None,
    options: ParserOptions | None = None,
    mode: ParseMode | None = None,
) -> SchemaError:
    with pytest.raises(error_type) as exc_info:
        parse_schema(source, options, mode=mode)
    error = exc_info.value
    assert error.diagnostic.code == code
    assert (error.line, error.column) == position
    if message is not None:
        assert error.message == message
    return error


def _dict_loader(files: dict[str, str]):
    def load(requested: str, including_path: str) -> tuple[str, str]:
        if requested not in files:
            raise FileNotFoundError(f"No such file: {requested!r}")
        return requested, files[requested]

    return load


# Scenario A
def test_single_struct_with_two_int_fields():
    schema = parse_schema(case_source("single_struct_two_ints"))

    assert schema.names == ("Point",)
    point = schema["Point"]
    assert point.fields == (Field("x", FieldType.INT), Field("y", FieldType.INT))
    assert point.position == Position(1, 8)
    assert point.fields[1].position == Position(1, 27)


# Scenario B
def test_nested_struct_resolves_to_registered_definition():
    symbols = SymbolTable()
    schema = parse_schema(case_source("nested_struct_with_struct_keyword"), symbols=symbols)

    inner = schema["B"].get_field("inner")
    assert inner == Field("inner", FieldType.NESTED_STRUCT, nested_struct_name="A")
    assert symbols.lookup(inner.nested_struct_name) is schema["A"]


def test_nested_struct_keyword_is_optional():
    with_keyword = parse_schema(case_source("nested_struct_with_struct_keyword"))
    without_keyword = parse_schema(case_source("nested_struct_without_struct_keyword"))

    assert with_keyword == without_keyword


# Scenario C
def test_duplicate_struct_definition():
    error = _assert_error(
        case_source("duplicate_struct"),
        DuplicateDefinitionError,
        code="SCHEMA_DUPLICATE_STRUCT",
        position=(1, 29),
        message="Duplicate struct definition: 'A'",
    )
    assert str(error) == "<memory>:1:29: Duplicate struct definition: 'A'"


# Scenario D
def test_fixed_array_width_is_recorded():
    schema = parse_schema(case_source("fixed_array_field"))

    arr = schema["C"].get_field("arr")
    assert arr == Field("arr", FieldType.INT, array_width=5)
    assert arr.is_array


# Scenario E
def test_unterminated_struct_reports_end_of_input():
    _assert_error(
        case_source("unterminated_struct"),
        SchemaSyntaxError,
        code="PARSER_EXPECTED_TOKEN",
        position=(1, 18),
        message="Expected token: expected type name or '}', found end of input",
    )


def test_all_builtin_types():
    schema = parse_schema(case_source("all_builtin_types"))

    fields = schema["Everything"].fields
    assert [(f.name, f.type) for f in fields] == [
        ("flag", FieldType.BOOL),
        ("count", FieldType.INT),
        ("total", FieldType.LONG),
        ("ratio", FieldType.FLOAT),
        ("precise", FieldType.DOUBLE),
        ("label", FieldType.SSTRING),
        ("alias", FieldType.SSTRING),
    ]
    assert fields[3].position == Position(5, 11)


def test_declaration_order_is_preserved():
    schema = parse_schema(case_source("realistic_multi_struct_schema"))

    assert schema.names == ("Address", "Person")
    person = schema["Person"]
    assert person.field_names == ("name", "age", "active", "scores", "home", "previous")
    assert person.get_field("scores") == Field("scores", FieldType.DOUBLE, array_width=4)
    assert person.get_field("previous") == Field(
        "previous", FieldType.NESTED_STRUCT, nested_struct_name="Address", array_width=3
    )
    assert person.nested_struct_names == ("Address",)


def test_empty_input_and_empty_struct():
    assert len(parse_schema("")) == 0
    assert len(parse_schema("  // nothing here\n/* at all */\n")) == 0
    assert parse_schema(case_source("empty_struct"))["Empty"].fields == ()


def test_self_reference_is_allowed():
    schema = parse_schema(case_source("self_reference"))

    assert schema["Node"].get_field("next") == Field(
        "next", FieldType.NESTED_STRUCT, nested_struct_name="Node", array_width=2
    )


def test_unknown_type():
    error = _assert_error(
        case_source("unknown_type"),
        UnknownTypeError,
        code="SCHEMA_UNKNOWN_TYPE",
        position=(1, 14),
        message="Unknown type: 'Missing'",
    )
    assert error.type_name == "Missing"


def test_forward_reference_rejected_by_default():
    error = _assert_error(
        case_source("forward_reference"),
        UnknownTypeError,
        code="SCHEMA_UNKNOWN_TYPE",
        position=(1, 15),
    )
    assert error.type_name == "Later"


def test_forward_reference_allowed_when_enabled():
    options = ParserOptions(allow_forward_references=True)
    schema = parse_schema(case_source("forward_reference"), options)

    assert schema.names == ("User", "Later")
    assert schema["User"].get_field("x").nested_struct_name == "Later"
    assert [container.name for container in schema.dependency_order()] == ["Later", "User"]


def test_unresolved_forward_reference_fails_at_reference():
    options = ParserOptions(allow_forward_references=True)
    source = "struct A { B b; };\nstruct C { int x; };\n"

    error = _assert_error(source, UnknownTypeError, code="SCHEMA_UNKNOWN_TYPE", position=(1, 12), options=options)
    assert error.type_name == "B"


def test_duplicate_field_name():
    _assert_error(
        "struct A { int x; float x; };",
        DuplicateDefinitionError,
        code="SCHEMA_DUPLICATE_FIELD",
        position=(1, 25),
        message="Duplicate field name: 'x' in struct 'A'",
    )


@pytest.mark.parametrize(
    ("source", "position", "message"),
    [
        ("int x;", (1, 1), "expected 'struct', found 'int'"),
        ("struct { };", (1, 8), "expected struct name, found '{'"),
        ("struct A int x;", (1, 10), "expected '{', found 'int'"),
        ("struct A { int };", (1, 16), "expected field name, found '}'"),
        ("struct A { int x }", (1, 18), "expected ';', found '}'"),
        ("struct A { int x; }", (1, 20), "expected ';', found end of input"),
        ("struct A { 5 x; };", (1, 12), "expected type name or '}', found '5'"),
        ("struct A { int x[; };", (1, 18), "expected array width, found ';'"),
        ("struct A { int x[5; };", (1, 19), "expected ']', found ';'"),
        ("struct A { struct int x; };", (1, 19), "expected struct name after 'struct', found 'int'"),
        ("struct A { struct 5 x; };", (1, 19), "expected struct name, found '5'"),
        ('struct A { }; "x"', (1, 15), "expected 'struct', found \"x\""),
    ],
)
def test_syntax_errors(source: str, position: tuple[int, int], message: str):
    _assert_error(
        source,
        SchemaSyntaxError,
        code="PARSER_EXPECTED_TOKEN",
        position=position,
        message=f"Expected token: {message}",
    )


@pytest.mark.parametrize(
    ("source", "position"),
    [
        ("struct int { };", (1, 8)),
        ("struct sstr_t { };", (1, 8)),
        ("struct struct { };", (1, 8)),
        ("struct A { int struct; };", (1, 16)),
        ("struct A { struct struct x; };", (1, 19)),
    ],
)
def test_reserved_names(source: str, position: tuple[int, int]):
    _assert_error(source, SchemaSyntaxError, code="PARSER_RESERVED_NAME", position=position)


def test_unrecognized_character_is_lexical_error():
    error = _assert_error(
        case_source("unrecognized_character"),
        LexicalError,
        code="LEXER_UNRECOGNIZED_CHARACTER",
        position=(1, 20),
        message="Unrecognized character: '='",
    )
    assert error.diagnostic.category == "lexer"


def test_negative_array_width_is_invalid_width():
    _assert_error(
        "struct A { int x[-1]; };",
        InvalidArrayWidthError,
        code="SCHEMA_INVALID_ARRAY_WIDTH",
        position=(1, 18),
        message="Invalid array width: array width must be positive, found '-1'",
    )


def test_negative_array_width_is_invalid_even_with_zero_widths_allowed():
    options = ParserOptions(allow_zero_width_arrays=True)

    _assert_error(
        "struct A { int x[-3]; };",
        InvalidArrayWidthError,
        code="SCHEMA_INVALID_ARRAY_WIDTH",
        position=(1, 18),
        options=options,
    )


def test_negative_float_array_width_is_invalid_width():
    _assert_error(
        "struct A { int x[-1.5]; };",
        InvalidArrayWidthError,
        code="SCHEMA_INVALID_ARRAY_WIDTH",
        position=(1, 18),
        message="Invalid array width: expected integer literal, found '-1.5'",
    )


def test_unterminated_comment_is_lexical_error():
    _assert_error("struct A { /* int x; };", LexicalError, code="LEXER_UNTERMINATED_COMMENT", position=(1, 12))


def test_lexical_error_on_first_token():
    _assert_error("@", LexicalError, code="LEXER_UNRECOGNIZED_CHARACTER", position=(1, 1))


def test_stray_angle_bracket_is_unrecognized_character():
    _assert_error(
        "struct A { int x; }; <",
        LexicalError,
        code="LEXER_UNRECOGNIZED_CHARACTER",
        position=(1, 22),
        message="Unrecognized character: '<'",
    )


@pytest.mark.parametrize(
    ("source", "position", "message"),
    [
        ("struct Z { int items[0]; };", (1, 22), "Invalid array width: array width must be positive, found '0'"),
        ("struct Bag { int items[]; };", (1, 24), "Invalid array width: missing array width"),
        (
            "struct F { int items[2.5]; };",
            (1, 22),
            "Invalid array width: expected integer literal, found '2.5'",
        ),
        ("struct N { int items[N]; };", (1, 22), "Invalid array width: expected integer literal, found 'N'"),
    ],
)
def test_invalid_array_widths(source: str, position: tuple[int, int], message: str):
    _assert_error(
        source,
        InvalidArrayWidthError,
        code="SCHEMA_INVALID_ARRAY_WIDTH",
        position=position,
        message=message,
    )


def test_zero_width_array_allowed_when_enabled():
    options = ParserOptions(allow_zero_width_arrays=True)
    schema = parse_schema(case_source("zero_width_array"), options)

    assert schema["Z"].get_field("items").array_width == 0


def test_unsized_array_allowed_in_legacy_mode():
    schema = parse_schema(case_source("unsized_array"), mode=ParseMode.LEGACY)

    items = schema["Bag"].get_field("items")
    assert items.array_width == 0
    assert items.is_array


def test_legacy_mode_tolerates_missing_and_stray_semicolons():
    loose = parse_schema(case_source("missing_semicolons"), mode=ParseMode.LEGACY)
    stray = parse_schema(case_source("stray_semicolons"), mode=ParseMode.LEGACY)

    assert loose.names == ("Loose", "Other")
    assert loose["Loose"].field_names == ("a", "b")
    assert loose["Other"].get_field("l").nested_struct_name == "Loose"
    assert stray["Stray"].field_names == ("a",)


def test_legacy_mode_options():
    options = ParserOptions.for_mode(ParseMode.LEGACY)

    assert options.mode == ParseMode.LEGACY
    assert options.allow_unsized_arrays is True
    assert options.lenient_semicolons is True
    assert options.allow_zero_width_arrays is False
    assert options.allow_forward_references is False
    assert ParserOptions.for_mode(ParseMode.STRICT) == ParserOptions()


def test_options_and_mode_are_mutually_exclusive():
    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        parse_schema("", ParserOptions(), mode=ParseMode.LEGACY)


@pytest.mark.parametrize("case", ALL_SCHEMA_CASES, ids=case_id)
def test_parser_runs_all_central_cases(case: SchemaCase):
    for mode, should_parse in (
        (ParseMode.STRICT, case.strict_should_parse_cleanly),
        (ParseMode.LEGACY, case.legacy_should_parse_cleanly),
    ):
        if should_parse:
            schema = parse_schema(case.source, mode=mode)
            assert len(set(schema.names)) == len(schema)
        else:
            with pytest.raises(SchemaError):
                parse_schema(case.source, mode=mode)


def test_include_splices_declarations_in_order():
    files = {"common.h": "struct Common { int id; };\n"}
    options = ParserOptions(include_loader=_dict_loader(files))
    source = textwrap.dedent(
        """
        #include "common.h"
        struct Main { Common c; };
        """
    ).lstrip()

    schema = parse_schema(source, options)

    assert schema.names == ("Common", "Main")
    assert schema["Main"].get_field("c").nested_struct_name == "Common"


def test_include_accepts_angle_brackets():
    files = {"types.h": "struct T { bool b; };"}
    options = ParserOptions(include_loader=_dict_loader(files))

    assert parse_schema("#include <types.h>\nstruct U { T t; };", options).names == ("T", "U")


def test_nested_includes():
    files = {
        "outer.h": '#include "inner.h"\nstruct Outer { Inner i; };\n',
        "inner.h": "struct Inner { long v; };\n",
    }
    options = ParserOptions(include_loader=_dict_loader(files))

    schema = parse_schema('#include "outer.h"\nstruct Top { Outer o; };\n', options)

    assert schema.names == ("Inner", "Outer", "Top")


def test_include_disabled_without_loader():
    _assert_error('#include "common.h"\n', SchemaSyntaxError, code="PARSER_INCLUDE_DISABLED", position=(1, 1))


def test_include_of_missing_file():
    options = ParserOptions(include_loader=_dict_loader({}))

    error = _assert_error(
        'struct A { };\n#include "missing.h"\n',
        SchemaSyntaxError,
        code="PARSER_INCLUDE_FAILED",
        position=(2, 10),
        options=options,
    )
    assert isinstance(error.__cause__, FileNotFoundError)
    assert "missing.h" in error.message


@pytest.mark.parametrize(
    ("source", "position", "message"),
    [
        ("#define X", (1, 2), "expected 'include', found 'define'"),
        ("#include common.h", (1, 10), "expected file name, found 'common'"),
        ("# 5", (1, 3), "expected 'include', found '5'"),
    ],
)
def test_malformed_include(source: str, position: tuple[int, int], message: str):
    options = ParserOptions(include_loader=_dict_loader({}))

    _assert_error(
        source,
        SchemaSyntaxError,
        code="PARSER_EXPECTED_TOKEN",
        position=position,
        message=f"Expected token: {message}",
        options=options,
    )


def test_include_cycle_is_detected():
    files = {
        "a.h": '#include "b.h"\nstruct A { int x; };\n',
        "b.h": '#include "a.h"\n',
    }
    options = ParserOptions(include_loader=_dict_loader(files))

    with pytest.raises(SchemaSyntaxError) as exc_info:
        parse_schema(files["a.h"], options, source_path="a.h")

    diagnostic = exc_info.value.diagnostic
    assert diagnostic.code == "PARSER_INCLUDE_CYCLE"
    assert diagnostic.source_path == "b.h"
    assert diagnostic.message == "Include cycle detected: a.h -> b.h -> a.h"


def test_self_include_is_a_cycle():
    files = {"x.h": '#include "x.h"\n'}
    options = ParserOptions(include_loader=_dict_loader(files))

    with pytest.raises(SchemaSyntaxError, match="x.h -> x.h"):
        parse_schema(files["x.h"], options, source_path="x.h")


def test_including_same_file_twice_duplicates_structs():
    files = {"common.h": "struct Common { int id; };\n"}
    options = ParserOptions(include_loader=_dict_loader(files))

    with pytest.raises(DuplicateDefinitionError) as exc_info:
        parse_schema('#include "common.h"\n#include "common.h"\n', options)

    assert exc_info.value.diagnostic.source_path == "common.h"
    assert exc_info.value.diagnostic.position == Position(1, 8)


def test_errors_in_included_file_point_into_that_file():
    files = {"broken.h": "struct Broken {\n    int x\n};\n"}
    options = ParserOptions(include_loader=_dict_loader(files))

    with pytest.raises(SchemaSyntaxError) as exc_info:
        parse_schema('#include "broken.h"\n', options, source_path="main.schema")

    diagnostic = exc_info.value.diagnostic
    assert diagnostic.source_path == "broken.h"
    assert diagnostic.position == Position(3, 1)
    assert str(exc_info.value) == "broken.h:3:1: Expected token: expected ';', found '}'"


def test_included_struct_can_reference_includer_declarations():
    files = {"user.h": "struct User { Base b; };\n"}
    options = ParserOptions(include_loader=_dict_loader(files))

    schema = parse_schema('struct Base { int id; };\n#include "user.h"\n', options)

    assert schema.names == ("Base", "User")


def test_parser_state_reaches_done():
    parser = Parser(TokenSource(iter_tokens(case_source("single_struct_two_ints"))))

    assert parser.state == ParserState.EXPECT_STRUCT_KEYWORD
    schema = parse_schema_file_contents(parser)

    assert parser.state == ParserState.DONE
    assert parser.current_struct is None
    assert "Point" in parser.symbols
    assert schema.names == ("Point",)


def test_parser_state_is_error_after_failure():
    parser = Parser(TokenSource(iter_tokens("struct A { int x[0]; };")))

    with pytest.raises(InvalidArrayWidthError):
        parse_schema_file_contents(parser)

    assert parser.state == ParserState.ERROR
    assert parser.current_struct is not None
    assert parser.current_struct.name == "A"


def test_parser_state_is_error_after_lexical_failure():
    parser = Parser(TokenSource(iter_tokens("struct A { int x = 1; };")))

    with pytest.raises(LexicalError):
        parse_schema_file_contents(parser)

    assert parser.state == ParserState.ERROR


def test_token_source_requires_eof():
    with pytest.raises(ValueError, match="EOF"):
        TokenSource([])


def test_token_source_never_consumes_eof():
    source = TokenSource(iter_tokens("x"))

    first = source.bump()
    assert first.text == "x"
    assert source.previous is first
    eof = source.bump()
    assert source.bump() is eof
    assert source.current is eof


def test_parse_tokens_accepts_pre_lexed_tokens():
    tokens = Lexer(case_source("fixed_array_field")).lex()

    schema = parse_tokens(tokens, source_path="tokens.schema")

    assert schema["C"].get_field("arr").array_width == 5


def test_sessions_are_isolated_between_parses():
    first = parse_schema("struct A { int x; };")
    second = parse_schema("struct A { float y; };")

    assert first["A"].get_field("x") is not None
    assert second["A"].get_field("y") is not None


def test_shared_session_symbols_are_reused():
    session = ParseSession()
    parser = Parser(TokenSource(iter_tokens("struct A { };")), session=session)
    parse_schema_file_contents(parser)

    assert len(session.symbols) == 1
    second = Parser(TokenSource(iter_tokens("struct A { };")), session=session)
    with pytest.raises(DuplicateDefinitionError):
        parse_schema_file_contents(second)


def test_fixed_capacity_symbol_table_parses_many_structs():
    symbols = SymbolTable(1, max_load_factor=None)
    source = "\n".join(f"struct S{i} {{ int v; }};" for i in range(50)) + "\nstruct Last { S49 tail; S0 head; };\n"

    schema = parse_schema(source, symbols=symbols)

    assert len(schema) == 51
    assert symbols.bucket_count == 1
    assert symbols.max_chain_length == 51


def test_struct_registration_is_logged(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.DEBUG, logger="jsongenpy.parser.grammar"):
        parse_schema(case_source("single_struct_two_ints"))

    assert "registered struct Point with 2 field(s) from <memory>" in caplog.text


def test_parsing_is_deterministic():
    source = case_source("realistic_multi_struct_schema")

    assert parse_schema(source) == parse_schema(source)
