import textwrap

import pytest

from restscan.exceptions import ParseFailure
from restscan.java.markers import MarkerKind, classify_marker
from restscan.java.parser import JavaParser
from restscan.java.syntax import parse_compilation_unit


def test_classify_marker_known_and_unknown():
    assert classify_marker("RestController") is MarkerKind.CONTROLLER
    assert classify_marker("PatchMapping") is MarkerKind.VERB_MAPPING
    assert classify_marker("NotBlank") is MarkerKind.REQUIRED_CONSTRAINT
    assert classify_marker("Lombok") is MarkerKind.OTHER


def test_parser_rejects_broken_source():
    with pytest.raises(ParseFailure):
        JavaParser().parse("public class Broken { void x( }")


def test_compilation_unit_package_and_nested_classes_in_order():
    src = textwrap.dedent(
        """
        package com.acme.api;

        public class Outer {
            static class Inner {}
        }

        interface Other {}
        """
    )
    unit = parse_compilation_unit(src)
    assert unit.package == "com.acme.api"
    assert [(c.name, c.kind) for c in unit.classes] == [
        ("Outer", "class"),
        ("Inner", "class"),
        ("Other", "interface"),
    ]


def test_method_parameters_throws_and_line():
    src = textwrap.dedent(
        """
        class C {
            @GetMapping("/a")
            public ResponseEntity<List<UserDto>> list(@PathVariable("id") Long id,
                                                      @RequestParam(required = false) String q)
                    throws NotFoundException, java.io.IOException {
                return null;
            }
        }
        """
    )
    method = parse_compilation_unit(src).classes[0].methods[0]
    assert method.name == "list"
    assert method.return_type == "ResponseEntity<List<UserDto>>"
    assert method.throws == ("NotFoundException", "java.io.IOException")
    assert method.line == 3
    assert [(p.name, p.type) for p in method.parameters] == [("id", "Long"), ("q", "String")]
    assert [m.name for m in method.parameters[0].markers] == ["PathVariable"]


def test_annotation_arguments_positional_named_and_arrays():
    src = textwrap.dedent(
        """
        class C {
            @RequestMapping(value = {"/x", "/y"}, method = RequestMethod.POST)
            void a() {}

            @GetMapping("/plain\\"quoted")
            void b() {}

            @GetMapping(BASE + "/c")
            void c() {}
        }
        """
    )
    a, b, c = parse_compilation_unit(src).classes[0].methods

    mapping = a.markers[0]
    assert mapping.kind is MarkerKind.REQUEST_MAPPING
    assert mapping.arguments["value"].is_array
    assert mapping.string_attr("value") == "/x"
    assert mapping.arguments["method"].text == "RequestMethod.POST"

    assert b.markers[0].string_attr("value") == '/plain"quoted'
    assert c.markers[0].string_attr("value") == ""


def test_field_declarations_element_type_and_javadoc():
    src = textwrap.dedent(
        """
        class UserDto {
            /**
             * The login name.
             * @see Account
             */
            @NotBlank
            private String name, alias;

            private byte[] avatar;
        }
        """
    )
    fields = parse_compilation_unit(src).classes[0].fields
    assert fields[0].names == ("name", "alias")
    assert fields[0].type == "String"
    assert fields[0].doc.startswith("/**")
    assert [m.name for m in fields[0].markers] == ["NotBlank"]
    assert fields[1].type == "byte"
    assert fields[1].doc == ""


def test_qualified_annotation_uses_simple_name():
    src = "@org.springframework.web.bind.annotation.RestController class C {}"
    decl = parse_compilation_unit(src).classes[0]
    assert decl.markers[0].name == "RestController"
    assert decl.markers[0].kind is MarkerKind.CONTROLLER


def test_line_comment_inside_annotation_arguments_is_ignored():
    src = textwrap.dedent(
        """
        class C {
            @GetMapping( // list users
                "/users")
            void a() {}

            @RequestMapping(
                // legacy route
                path = "/old",
                method = RequestMethod.GET)
            void b() {}
        }
        """
    )
    a, b = parse_compilation_unit(src).classes[0].methods
    assert a.markers[0].string_attr("value") == "/users"
    assert list(b.markers[0].arguments) == ["path", "method"]
    assert b.markers[0].string_attr("value", "path") == "/old"
