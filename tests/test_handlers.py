import textwrap

from restscan.extractors.handlers import (
    binding_location,
    extract_handlers,
    extract_parameter,
    extract_route_group,
)
from restscan.java.markers import Marker
from restscan.java.syntax import ParamDecl, parse_compilation_unit


def _controller(body: str, header: str = '@RestController\n@RequestMapping("/api/users")'):
    src = "package com.acme.web;\n\n" + header + "\npublic class UserController {\n" + textwrap.dedent(body) + "\n}\n"
    return parse_compilation_unit(src)


def test_route_group_basic():
    unit = _controller(
        """
        @PostMapping("/users")
        public ResponseEntity<UserResponse> create(@Valid @RequestBody CreateUserRequest request) {
            return null;
        }

        @GetMapping(value = "/{id}")
        public UserResponse get(@PathVariable Long id) throws UserNotFoundException {
            return null;
        }

        public void helper() {}
        """
    )
    group = extract_route_group(unit.classes[0], unit.package)

    assert group.name == "UserController"
    assert group.package_name == "com.acme.web"
    assert group.request_mapping == "/api/users"
    assert [h.method_name for h in group.handlers] == ["create", "get"]

    create, get = group.handlers
    assert create.http_method == "POST"
    assert create.path == "/users"
    assert create.return_type == "ResponseEntity<UserResponse>"
    assert create.parameters[0].location == "body"
    assert create.parameters[0].required is True
    assert create.parameters[0].validation_annotations == ["Valid", "RequestBody"]

    assert get.http_method == "GET"
    assert get.path == "/{id}"
    assert get.exceptions == ["UserNotFoundException"]
    assert get.line_number > create.line_number


def test_first_verb_marker_wins_in_declaration_order():
    unit = _controller(
        """
        @DeleteMapping("/a")
        @PostMapping("/b")
        public void both() {}
        """
    )
    [h] = extract_handlers(unit.classes[0])
    assert h.http_method == "DELETE"
    assert h.path == "/a"


def test_request_mapping_verb_from_method_attribute_or_get():
    unit = _controller(
        """
        @RequestMapping(value = "/x", method = RequestMethod.PUT)
        public void put() {}

        @RequestMapping(path = "/y", method = {RequestMethod.PATCH, RequestMethod.POST})
        public void patch() {}

        @RequestMapping("/z")
        public void plain() {}
        """
    )
    put, patch, plain = extract_handlers(unit.classes[0])
    assert (put.http_method, put.path) == ("PUT", "/x")
    assert (patch.http_method, patch.path) == ("PATCH", "/y")
    assert (plain.http_method, plain.path) == ("GET", "/z")


def test_missing_or_non_literal_path_is_empty():
    unit = _controller(
        """
        @GetMapping
        public void a() {}

        @PutMapping(BASE + "/b")
        public void b() {}
        """
    )
    a, b = extract_handlers(unit.classes[0])
    assert (a.http_method, a.path) == ("GET", "")
    assert (b.http_method, b.path) == ("PUT", "")


def test_route_group_without_prefix_and_unrecognized_annotations():
    unit = _controller(
        """
        @Operation(summary = "Ping")
        @GetMapping("/ping")
        public String ping() { return "pong"; }
        """,
        header='@RestController\n@Tag(name = "users")',
    )
    group = extract_route_group(unit.classes[0])
    assert group.request_mapping == ""
    assert group.existing_annotations == {"Tag": {"name": "users"}}
    assert group.handlers[0].existing_annotations == {"Operation": {"summary": "Ping"}}


def test_binding_priority_body_beats_path():
    param = ParamDecl(
        name="x",
        type="UserDto",
        markers=(Marker.of("PathVariable"), Marker.of("RequestBody")),
    )
    assert binding_location(param) == "body"


def test_binding_header_query_and_required_flag():
    header = extract_parameter(ParamDecl("token", "String", (Marker.of("RequestHeader"),)))
    assert header.location == "header"
    assert header.required is False

    query = extract_parameter(ParamDecl("page", "int", (Marker.of("RequestParam"), Marker.of("NotNull"))))
    assert query.location == "query"
    assert query.required is False
    assert query.validation_annotations == ["RequestParam", "NotNull"]

    bare = extract_parameter(ParamDecl("principal", "Principal"))
    assert bare.location == "query"
    assert bare.validation_annotations == []
