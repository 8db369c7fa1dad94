import pytest

from schema_typegen.shared.naming import (
    build_identifier,
    join_ref,
    slugify,
    split_ref,
    to_camel_case,
)


class TestSplitRef:
    @pytest.mark.parametrize(
        "ref,parts",
        [
            ("#/components/schemas/User", ["components", "schemas", "User"]),
            ("#/definitions/User", ["definitions", "User"]),
            ("definitions/User", ["definitions", "User"]),
            ("#/definitions//User/", ["definitions", "User"]),
            ("#", []),
            ("#/", []),
        ],
    )
    def test_split_ref(self, ref, parts):
        assert split_ref(ref) == parts

    def test_json_pointer_escapes(self):
        assert split_ref("#/paths/~1users~1{id}/a~0b") == ["paths", "/users/{id}", "a~b"]


class TestJoinRef:
    def test_join_ref(self):
        assert join_ref(["components", "schemas", "User"]) == "#/components/schemas/User"

    def test_join_ref_escapes(self):
        assert join_ref(["paths", "/users", "a~b"]) == "#/paths/~1users/a~0b"

    def test_join_then_split(self):
        parts = ["components", "schemas", "__api_request_bodies", "a/b", "Body0"]
        assert split_ref(join_ref(parts)) == parts


class TestBuildIdentifier:
    @pytest.mark.parametrize(
        "part,identifier",
        [
            ("components", "Components"),
            ("schemas", "Schemas"),
            ("User", "User"),
            ("API", "API"),
            ("getPing", "GetPing"),
            ("user-id", "UserId"),
            ("__api_request_bodies", "ApiRequestBodies"),
            ("Response200", "Response200"),
            ("$200", "$200"),
            ("x.y z", "XYZ"),
        ],
    )
    def test_build_identifier(self, part, identifier):
        assert build_identifier(part) == identifier

    def test_build_identifier_caching(self):
        assert build_identifier("some_name") is build_identifier("some_name")


class TestToCamelCase:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("id", "id"),
            ("body", "body"),
            ("user_id", "userId"),
            ("X-Request-ID", "xRequestId"),
            ("X-Rate-Limit", "xRateLimit"),
            ("userId", "userId"),
            ("UserId", "userId"),
            ("", ""),
            ("---", ""),
        ],
    )
    def test_to_camel_case(self, value, expected):
        assert to_camel_case(value) == expected


class TestSlugify:
    def test_slugify_basic(self):
        assert slugify("getUser") == "get_user"
        assert slugify("get_/users/{id}") == "get_users_id"

    def test_slugify_fallback(self):
        assert slugify("") == "operation"
        assert slugify("!!!", fallback="get_operation") == "get_operation"
