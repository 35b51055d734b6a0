"""Tests for decoding resource attributes and API responses."""

import pytest

from essecurity.body import build_body
from essecurity.errors import ConfigurationError, ResponseDecodeError
from essecurity.models import ApiKeyResource, CreatedApiKey, Index, RoleDescriptor


class TestApiKeyResourceDecoding:
    """Test ApiKeyResource.from_dict validation."""

    def test_full_resource(self):
        resource = ApiKeyResource.from_dict(
            {
                "id": "abc",
                "api_key": "secret",
                "encoded": "YWJjOnNlY3JldA==",
                "name": "ci",
                "role_descriptors": [
                    {
                        "name": "reader",
                        "cluster": ["monitor"],
                        "indices": [{"names": ["logs-*"], "privileges": ["read"]}],
                    }
                ],
            }
        )
        assert resource.id == "abc"
        assert resource.role_descriptors == [
            RoleDescriptor(
                name="reader",
                cluster=["monitor"],
                indices=[Index(names=["logs-*"], privileges=["read"])],
            )
        ]

    def test_optional_lists_default_to_empty(self):
        resource = ApiKeyResource.from_dict(
            {
                "name": "ci",
                "role_descriptors": [{"name": "r", "cluster": None, "indices": None}],
            }
        )
        assert resource.role_descriptors[0].cluster == []
        assert resource.role_descriptors[0].indices == []
        assert resource.id is None

    def test_missing_name(self):
        with pytest.raises(ConfigurationError, match="'name'"):
            ApiKeyResource.from_dict({"role_descriptors": []})

    def test_missing_role_descriptors(self):
        with pytest.raises(ConfigurationError, match="role_descriptors"):
            ApiKeyResource.from_dict({"name": "ci"})

    def test_not_an_object(self):
        with pytest.raises(ConfigurationError):
            ApiKeyResource.from_dict(["name", "ci"])

    def test_cluster_must_be_list(self):
        with pytest.raises(ConfigurationError, match="cluster"):
            ApiKeyResource.from_dict(
                {"name": "ci", "role_descriptors": [{"name": "r", "cluster": "monitor"}]}
            )

    def test_index_names_required(self):
        with pytest.raises(ConfigurationError, match="indices.names"):
            ApiKeyResource.from_dict(
                {
                    "name": "ci",
                    "role_descriptors": [
                        {"name": "r", "indices": [{"privileges": ["read"]}]}
                    ],
                }
            )

    def test_privileges_must_be_strings(self):
        with pytest.raises(ConfigurationError, match="indices.privileges"):
            ApiKeyResource.from_dict(
                {
                    "name": "ci",
                    "role_descriptors": [
                        {"name": "r", "indices": [{"names": ["a"], "privileges": [1]}]}
                    ],
                }
            )

    def test_to_dict_round_trip(self):
        data = {
            "id": "abc",
            "api_key": "secret",
            "encoded": "enc",
            "name": "ci",
            "role_descriptors": [
                {
                    "name": "r",
                    "cluster": ["monitor"],
                    "indices": [{"names": ["logs-*"], "privileges": ["read"]}],
                }
            ],
        }
        assert ApiKeyResource.from_dict(data).to_dict() == data

    def test_exact_duplicates_collapse(self):
        grant = {"names": ["logs-*"], "privileges": ["read"]}
        role = {"name": "r", "cluster": ["monitor"], "indices": [grant, dict(grant)]}
        resource = ApiKeyResource.from_dict(
            {"name": "ci", "role_descriptors": [role, dict(role)]}
        )
        assert len(resource.role_descriptors) == 1
        assert resource.role_descriptors[0].indices == [
            Index(names=["logs-*"], privileges=["read"])
        ]
        assert build_body(resource) == {
            "role_descriptors": {
                "r": {"cluster": ["monitor"], "index": [grant]},
            }
        }

    def test_same_name_different_grants_kept_for_last_write(self):
        resource = ApiKeyResource.from_dict(
            {
                "name": "ci",
                "role_descriptors": [
                    {"name": "r", "cluster": ["monitor"]},
                    {"name": "r", "cluster": ["manage"]},
                ],
            }
        )
        assert len(resource.role_descriptors) == 2
        assert build_body(resource)["role_descriptors"]["r"]["cluster"] == ["manage"]

    def test_repr_hides_secrets(self):
        resource = ApiKeyResource(name="ci", api_key="secret", encoded="enc")
        assert "secret" not in repr(resource)
        assert "enc" not in repr(resource)


class TestCanonicalRoleDescriptors:
    """Test order-insensitive comparison of set-typed attributes."""

    def test_role_order_ignored(self):
        a = ApiKeyResource(
            name="ci",
            role_descriptors=[RoleDescriptor(name="x"), RoleDescriptor(name="y")],
        )
        b = ApiKeyResource(
            name="ci",
            role_descriptors=[RoleDescriptor(name="y"), RoleDescriptor(name="x")],
        )
        assert a.canonical_role_descriptors() == b.canonical_role_descriptors()

    def test_cluster_order_matters(self):
        a = ApiKeyResource(
            name="ci", role_descriptors=[RoleDescriptor(name="x", cluster=["a", "b"])]
        )
        b = ApiKeyResource(
            name="ci", role_descriptors=[RoleDescriptor(name="x", cluster=["b", "a"])]
        )
        assert a.canonical_role_descriptors() != b.canonical_role_descriptors()


class TestCreatedApiKey:
    """Test validation of the create response."""

    def test_valid_response(self):
        created = CreatedApiKey.from_response(
            {
                "id": "VuaCfGcBCdbkQm-e5aOx",
                "name": "ci",
                "api_key": "ui2lp2axTNmsyakw9tvNnw",
                "encoded": "VnVhQ2ZHY0JDZGJrUW0tZTVhT3g6dWkybHAyYXhUTm1zeWFrdzl0dk5udw==",
            }
        )
        assert created.id == "VuaCfGcBCdbkQm-e5aOx"
        assert created.api_key == "ui2lp2axTNmsyakw9tvNnw"
        assert created.name == "ci"
        assert created.expiration is None

    def test_missing_field(self):
        with pytest.raises(ResponseDecodeError, match="'encoded'"):
            CreatedApiKey.from_response({"id": "a", "api_key": "b"})

    def test_wrong_type(self):
        with pytest.raises(ResponseDecodeError, match="'id'.*int"):
            CreatedApiKey.from_response({"id": 1, "api_key": "b", "encoded": "c"})

    def test_not_an_object(self):
        with pytest.raises(ResponseDecodeError):
            CreatedApiKey.from_response(["a"])
