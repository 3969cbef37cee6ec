"""Tests for TypeParser."""
import pytest

from payloadscan.parser.type_parser import TypeSyntaxError, parse_type
from payloadscan.schema.models import (
    ArrayType,
    ClassType,
    PrimitiveType,
    TypeVariable,
    WildcardType,
)


class TestTypeParser:
    """Test parsing of rendered type strings."""

    def test_simple_and_qualified_names(self):
        """Test plain class names."""
        assert parse_type("Dto") == ClassType("Dto")
        assert parse_type("com.example.Dto") == ClassType("com.example.Dto")

    def test_primitives(self):
        """Test Java primitives."""
        assert parse_type("int") == PrimitiveType("int")
        assert parse_type("void") == PrimitiveType("void")

    def test_nested_arguments(self):
        """Test generic arguments at several levels."""
        result = parse_type("retrofit2.Call<java.util.Map<String, java.util.List<Dto>>>")

        assert result.name == "retrofit2.Call"
        inner = result.args[0]
        assert inner.name == "java.util.Map"
        assert inner.args == (
            ClassType("String"),
            ClassType("java.util.List", (ClassType("Dto"),)),
        )

    def test_wildcards(self):
        """Test Java wildcards."""
        assert parse_type("List<?>").args == (WildcardType(),)
        assert parse_type("List<? extends Dto>").args == (WildcardType(ClassType("Dto"), "extends"),)
        assert parse_type("Continuation<? super Dto>").args == (WildcardType(ClassType("Dto"), "super"),)

    def test_kotlin_projections(self):
        """Test out/in/star projections."""
        assert parse_type("List<out Dto>").args == (WildcardType(ClassType("Dto"), "extends"),)
        assert parse_type("Comparator<in Dto>").args == (WildcardType(ClassType("Dto"), "super"),)
        assert parse_type("List<*>").args == (WildcardType(),)

    def test_nullable_suffix_dropped(self):
        """Test Kotlin nullable types."""
        assert parse_type("Dto?") == ClassType("Dto")
        assert parse_type("List<Dto?>?") == ClassType("List", (ClassType("Dto"),))

    def test_arrays(self):
        """Test arrays and varargs."""
        assert parse_type("Dto[]") == ArrayType(ClassType("Dto"))
        assert parse_type("int[][]") == ArrayType(ArrayType(PrimitiveType("int")))
        assert parse_type("String...") == ArrayType(ClassType("String"))

    def test_type_variables(self):
        """Test names in the type-variable scope."""
        result = parse_type("Page<T>", type_variables=["T"])
        assert result.args == (TypeVariable("T"),)

    def test_name_resolution(self):
        """Test the name resolution hook."""
        result = parse_type("Call<Dto>", resolve_name=lambda name: f"pkg.{name}")
        assert result == ClassType("pkg.Call", (ClassType("pkg.Dto"),))

    def test_render(self):
        """Test canonical rendering."""
        text = "retrofit2.Call<java.util.List<? extends com.example.Dto>>"
        assert parse_type(text).render() == text

    @pytest.mark.parametrize("text", ["", "List<", "List<Dto", "List<Dto>>", "Dto extends", "Map<,>", "a-b"])
    def test_malformed(self, text):
        """Test malformed input raises."""
        with pytest.raises(TypeSyntaxError):
            parse_type(text)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
