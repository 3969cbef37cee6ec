"""
Type Parser - Parses rendered JVM/Kotlin type strings into type references.

Supports:
- Qualified and simple names (com.example.Dto, Dto)
- Type arguments (retrofit2.Call<java.util.List<Dto>>)
- Java wildcards (?, ? extends T, ? super T)
- Kotlin projections (out T, in T, *)
- Kotlin nullable suffix (Dto?), dropped
- Arrays and varargs (Dto[], Dto...)
- Java primitives and in-scope type variables
"""

import re
from typing import Callable, Iterable, List, Optional

from payloadscan.schema.models import (
    ArrayType,
    ClassType,
    PrimitiveType,
    TypeRef,
    TypeVariable,
    WildcardType,
)

PRIMITIVES = frozenset({
    "boolean", "byte", "char", "short", "int", "long", "float", "double", "void",
})

TOKEN_PATTERN = re.compile(r"\s*(?:([A-Za-z_$][\w$]*)|(\.\.\.|[.<>,?\[\]*]))")


class TypeSyntaxError(ValueError):
    """Raised when a type string cannot be parsed."""


class TypeParser:
    """Recursive-descent parser for rendered type strings"""

    def __init__(
        self,
        type_variables: Iterable[str] = (),
        resolve_name: Optional[Callable[[str], str]] = None,
    ):
        """
        Args:
            type_variables: Formal parameter names in scope (parsed as TypeVariable)
            resolve_name: Maps a written class name to its qualified name
        """
        self.type_variables = frozenset(type_variables)
        self.resolve_name = resolve_name or (lambda name: name)
        self._tokens: List[str] = []
        self._pos = 0
        self._text = ""

    def parse(self, text: str) -> TypeRef:
        """
        Parse a complete type string.

        Raises:
            TypeSyntaxError: If the text is not a well-formed type
        """
        self._text = text
        self._tokens = self._tokenize(text)
        self._pos = 0
        if not self._tokens:
            raise TypeSyntaxError("Empty type string")

        result = self._parse_type()
        if self._peek() is not None:
            self._fail(f"unexpected '{self._peek()}'")
        return result

    def _tokenize(self, text: str) -> List[str]:
        tokens = []
        pos = 0
        text = text.rstrip()
        while pos < len(text):
            match = TOKEN_PATTERN.match(text, pos)
            if not match:
                raise TypeSyntaxError(f"Invalid character in type '{text}' at {pos}")
            tokens.append(match.group(1) or match.group(2))
            pos = match.end()
        return tokens

    def _peek(self) -> Optional[str]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            self._fail("unexpected end")
        self._pos += 1
        return token

    def _expect(self, token: str) -> None:
        found = self._next()
        if found != token:
            self._fail(f"expected '{token}', found '{found}'")

    def _fail(self, message: str) -> None:
        raise TypeSyntaxError(f"Malformed type '{self._text}': {message}")

    def _parse_type(self) -> TypeRef:
        token = self._peek()
        if token == "?":
            self._next()
            return self._parse_wildcard()
        if token == "*":
            self._next()
            return WildcardType()
        if token in ("out", "in") and self._is_identifier(self._lookahead(1)):
            self._next()
            variance = "extends" if token == "out" else "super"
            return WildcardType(self._parse_type(), variance)
        return self._parse_named()

    def _parse_wildcard(self) -> WildcardType:
        token = self._peek()
        if token in ("extends", "super"):
            self._next()
            bound = self._parse_named()
            return WildcardType(bound, token)
        return WildcardType()

    def _parse_named(self) -> TypeRef:
        name = self._next()
        if not self._is_identifier(name):
            self._fail(f"expected a type name, found '{name}'")
        while self._peek() == "." and self._is_identifier(self._lookahead(1)):
            self._next()
            name = f"{name}.{self._next()}"

        args = []
        if self._peek() == "<":
            self._next()
            args.append(self._parse_type())
            while self._peek() == ",":
                self._next()
                args.append(self._parse_type())
            self._expect(">")

        # Kotlin nullability does not change the payload
        if self._peek() == "?":
            self._next()

        result = self._classify(name, tuple(args))
        while self._peek() in ("[", "..."):
            if self._next() == "[":
                self._expect("]")
            result = ArrayType(result)
        return result

    def _classify(self, name: str, args: tuple) -> TypeRef:
        if not args and name in PRIMITIVES:
            return PrimitiveType(name)
        if not args and name in self.type_variables:
            return TypeVariable(name)
        return ClassType(self.resolve_name(name), args)

    def _lookahead(self, offset: int) -> Optional[str]:
        index = self._pos + offset
        if index < len(self._tokens):
            return self._tokens[index]
        return None

    @staticmethod
    def _is_identifier(token: Optional[str]) -> bool:
        return token is not None and (token[0].isalpha() or token[0] in "_$")


def parse_type(
    text: str,
    type_variables: Iterable[str] = (),
    resolve_name: Optional[Callable[[str], str]] = None,
) -> TypeRef:
    """Convenience function to parse a type string in one call."""
    return TypeParser(type_variables, resolve_name).parse(text)
