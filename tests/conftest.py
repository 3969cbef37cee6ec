"""Shared fixtures: a symbol snapshot of a small Retrofit API."""
import pytest

from payloadscan.introspection import EndpointAnalyzer
from payloadscan.parser.snapshot_parser import SnapshotHost


def get_method(name, params=None, annotations=("retrofit2.http.GET",), **extra):
    """Method entry of a snapshot class."""
    method = {
        "name": name,
        "annotations": list(annotations),
        "parameters": params or [],
    }
    method.update(extra)
    return method


@pytest.fixture
def snapshot_document():
    """Snapshot with endpoint interfaces and the DTOs they use"""
    return {
        "classes": [
            {
                "name": "com.example.Api",
                "kind": "interface",
                "methods": [
                    get_method("restSomething", return_type="Dto"),
                    get_method("nested", return_type="Outer"),
                    get_method(
                        "suspendGet",
                        suspend=True,
                        return_type="java.lang.Object",
                        params=[{
                            "name": "$completion",
                            "type": "kotlin.coroutines.Continuation<? super Dto>",
                        }],
                    ),
                    get_method("unit", return_type="kotlin.Unit", annotations=["POST"]),
                    get_method(
                        "voidCall",
                        return_type="retrofit2.Call<java.lang.Void>",
                        annotations=["retrofit2.http.DELETE"],
                    ),
                    get_method("wrapped", return_type="retrofit2.Response<Dto>"),
                    get_method("wrappedList", return_type="retrofit2.Response<java.util.List<Dto>>"),
                    get_method("page", return_type="retrofit2.Call<Page<Dto>>"),
                    get_method("rawPage", return_type="Page"),
                    get_method("notAnnotated", return_type="Dto", annotations=[]),
                    get_method(
                        "create",
                        return_type="retrofit2.Call<kotlin.Unit>",
                        annotations=["retrofit2.http.POST"],
                        params=[
                            {"name": "dto", "type": "Dto", "annotations": ["retrofit2.http.Body"]},
                            {"name": "outer", "type": "Outer", "annotations": ["retrofit2.http.Body"]},
                        ],
                    ),
                    get_method(
                        "primitiveBody",
                        return_type="Dto",
                        annotations=["PUT"],
                        params=[
                            {"name": "count", "type": "int", "annotations": ["Body"]},
                            {"name": "dto", "type": "Dto", "annotations": ["Body"]},
                        ],
                    ),
                    get_method(
                        "byId",
                        return_type="Dto",
                        params=[{"name": "id", "type": "long", "annotations": ["retrofit2.http.Path"]}],
                    ),
                    get_method("node", return_type="Node"),
                    get_method("withEnum", return_type="WithEnum"),
                ],
            },
            {
                "name": "com.example.BaseApi",
                "kind": "interface",
                "methods": [get_method("inherited", return_type="Dto")],
            },
            {
                "name": "com.example.ChildApi",
                "kind": "interface",
                "supertypes": ["BaseApi"],
                "methods": [get_method("inherited", return_type="Dto", annotations=[])],
            },
            {
                "name": "com.example.Service",
                "kind": "class",
                "methods": [get_method("restSomething", return_type="Dto")],
            },
            {
                "name": "com.example.Dto",
                "fields": [
                    {"name": "a", "type": "Int"},
                    {"name": "b", "type": "String"},
                    {"name": "TAG", "type": "String", "static": True},
                ],
            },
            {
                "name": "com.example.Outer",
                "fields": [
                    {"name": "a", "type": "Int"},
                    {"name": "b", "type": "String"},
                    {"name": "c", "type": "Inner"},
                ],
            },
            {
                "name": "com.example.Inner",
                "fields": [{"name": "d", "type": "Int"}],
            },
            {
                "name": "com.example.Node",
                "fields": [{"name": "next", "type": "Node?"}],
            },
            {
                "name": "com.example.Page",
                "type_parameters": ["T"],
                "fields": [
                    {"name": "items", "type": "java.util.List<T>"},
                    {"name": "total", "type": "int"},
                ],
            },
            {
                "name": "com.example.Status",
                "kind": "enum",
                "fields": [
                    {"name": "ACTIVE", "enum_constant": True},
                    {"name": "INACTIVE", "enum_constant": True},
                    {"name": "PREFIX", "type": "String", "static": True},
                ],
            },
            {
                "name": "com.example.WithEnum",
                "fields": [{"name": "status", "type": "Status"}],
            },
        ]
    }


@pytest.fixture
def snapshot_host(snapshot_document):
    return SnapshotHost.from_dict(snapshot_document)


@pytest.fixture
def analyzer(snapshot_host):
    return EndpointAnalyzer(snapshot_host)


def names(records):
    """Field names of a list of field records."""
    return [record.name for record in records]
