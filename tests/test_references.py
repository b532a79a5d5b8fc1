from pathlib import Path

from restscan.domain.models import Handler, Parameter, RouteGroup
from restscan.extractors.handlers import extract_route_group
from restscan.extractors.references import (
    ReferenceResolver,
    ShapeLocator,
    discover_references,
    discover_shape_names,
    handler_type_expressions,
)
from restscan.java.syntax import parse_compilation_unit
from restscan.settings import DEFAULT_SHAPE_SUFFIXES, ExtractorSettings

SUFFIXES = DEFAULT_SHAPE_SUFFIXES


def test_list_return_discovers_element_shape():
    assert discover_shape_names("List<UserResponse>", SUFFIXES) == ["UserResponse"]


def test_deeply_nested_shape_is_discovered_once():
    expr = "ResponseEntity<Optional<List<Page<Wrapper<UserDto>>>>>"
    assert discover_shape_names(expr, SUFFIXES) == ["UserDto"]


def test_pre_order_parent_before_arguments():
    expr = "PageResponse<com.acme.UserDto>"
    assert discover_shape_names(expr, SUFFIXES) == ["PageResponse", "UserDto"]


def test_repeated_name_reported_once():
    assert discover_shape_names("Pair<UserDto, UserDto>", SUFFIXES) == ["UserDto"]


def test_non_matching_types_yield_nothing():
    assert discover_shape_names("ResponseEntity<Void>", SUFFIXES) == []
    assert discover_shape_names("", SUFFIXES) == []


def test_discover_references_skips_known_names():
    assert discover_references("Map<LoginReq, LoginRes>", {"LoginReq"}, SUFFIXES) == ["LoginRes"]


def test_handler_type_expressions_body_params_then_return():
    handler = Handler(
        method_name="create",
        http_method="POST",
        parameters=[
            Parameter(name="id", type="IdDto", location="path"),
            Parameter(name="body", type="CreateUserRequest", location="body"),
        ],
        return_type="UserResponse",
    )
    assert handler_type_expressions(handler) == ["CreateUserRequest", "UserResponse"]


def test_locator_finds_file_under_search_root(tmp_path: Path):
    target = tmp_path / "src" / "main" / "java" / "com" / "acme" / "dto" / "UserDto.java"
    target.parent.mkdir(parents=True)
    target.write_text("public class UserDto {}", encoding="utf-8")

    locator = ShapeLocator(tmp_path, ExtractorSettings())
    assert locator.locate("UserDto") == str(target)


def test_locator_ignores_build_output_and_estimates(tmp_path: Path):
    built = tmp_path / "target" / "UserDto.java"
    built.parent.mkdir(parents=True)
    built.write_text("public class UserDto {}", encoding="utf-8")

    locator = ShapeLocator(tmp_path, ExtractorSettings(estimated_dto_dir="gen/dto/"))
    assert locator.locate("UserDto") == "gen/dto/UserDto.java"


def test_locator_without_search_root_estimates():
    locator = ShapeLocator(None, ExtractorSettings())
    assert locator.locate("LoginRes") == "src/main/java/com/example/dto/LoginRes.java"


def test_resolver_placeholders_for_group(tmp_path: Path):
    group = RouteGroup(
        name="UserController",
        handlers=[
            Handler(
                method_name="create",
                http_method="POST",
                parameters=[Parameter(name="req", type="CreateUserRequest", location="body")],
                return_type="ResponseEntity<UserResponse>",
            ),
            Handler(method_name="list", return_type="List<UserResponse>"),
            # query parameters are not inspected
            Handler(
                method_name="search",
                parameters=[Parameter(name="filter", type="FilterDto", location="query")],
                return_type="void",
            ),
        ],
    )
    resolver = ReferenceResolver(ShapeLocator(tmp_path, ExtractorSettings()))
    shapes = resolver.placeholders_for(group, known_names={"UserResponse"})

    assert [s.class_name for s in shapes] == ["CreateUserRequest"]
    assert shapes[0].fields == []
    assert shapes[0].file_path.endswith("CreateUserRequest.java")


def test_wildcard_bound_discovers_bare_name():
    assert discover_shape_names("List<? extends UserDto>", SUFFIXES) == ["UserDto"]
    assert discover_shape_names("Page<? super com.acme.LoginRes>", SUFFIXES) == ["LoginRes"]


def test_type_use_annotation_on_body_argument(tmp_path: Path):
    src = """
    @RestController
    public class UserController {
        @PostMapping("/users/batch")
        public void batch(@RequestBody List<@Valid CreateUserRequest> requests) {}
    }
    """
    unit = parse_compilation_unit(src)
    group = extract_route_group(unit.classes[0], unit.package)
    [handler] = group.handlers

    # the raw parameter type is kept as written
    assert handler.parameters[0].type == "List<@Valid CreateUserRequest>"
    assert discover_shape_names(handler_type_expressions(handler)[0], SUFFIXES) == ["CreateUserRequest"]

    resolver = ReferenceResolver(ShapeLocator(tmp_path, ExtractorSettings()))
    shapes = resolver.placeholders_for(group, known_names=set())
    assert [s.class_name for s in shapes] == ["CreateUserRequest"]
    assert shapes[0].file_path.endswith("/CreateUserRequest.java")


def test_comma_in_inner_generic_hides_shape():
    # depth-naive split: only commas in the outermost argument list are safe
    assert discover_shape_names("ResponseEntity<Map<String, UserDto>>", SUFFIXES) == []
    assert discover_shape_names("Map<String, UserDto>", SUFFIXES) == ["UserDto"]
