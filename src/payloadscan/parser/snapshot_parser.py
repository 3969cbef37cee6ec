"""
Snapshot Parser - Host model backed by a JSON symbol snapshot.

A snapshot is the class and method metadata an analysis front end exported
from the program under inspection:

```json
{
  "classes": [
    {
      "name": "com.example.Api",
      "kind": "interface",
      "methods": [
        {
          "name": "getUser",
          "annotations": ["retrofit2.http.GET"],
          "return_type": "retrofit2.Call<User>",
          "parameters": [{"name": "id", "type": "long", "annotations": ["retrofit2.http.Path"]}]
        }
      ]
    },
    {
      "name": "com.example.User",
      "fields": [{"name": "id", "type": "long"}, {"name": "TABLE", "type": "String", "static": true}]
    }
  ]
}
```

Suspending methods are stored in their desugared form: ``"suspend": true``
and a trailing ``kotlin.coroutines.Continuation<? super T>`` parameter.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from payloadscan.parser.host_ports import HostModel
from payloadscan.parser.type_parser import TypeParser, TypeSyntaxError
from payloadscan.schema.models import (
    ClassDefinition,
    ClassType,
    FieldDefinition,
    MethodSignature,
    ParameterInfo,
    Suspending,
    TypeRef,
)

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot document is malformed."""


@dataclass(frozen=True)
class MethodDeclaration:
    """A method as declared in the snapshot (the snapshot's method node)."""

    owner: str
    name: str
    return_type: Optional[TypeRef]
    parameters: Tuple[ParameterInfo, ...] = ()
    annotations: FrozenSet[str] = frozenset()
    suspend: bool = False


class SnapshotHost(HostModel):
    """Host model over parsed snapshot classes"""

    def __init__(
        self,
        classes: Dict[str, ClassDefinition],
        methods: List[MethodDeclaration],
    ):
        self.classes = classes
        self.methods = methods
        self._methods_by_owner: Dict[str, List[MethodDeclaration]] = {}
        for method in methods:
            self._methods_by_owner.setdefault(method.owner, []).append(method)

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> "SnapshotHost":
        return SnapshotParser().parse(document)

    @classmethod
    def from_file(cls, path) -> "SnapshotHost":
        """Load a snapshot from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                document = json.load(f)
            except json.JSONDecodeError as e:
                raise SnapshotError(f"Invalid JSON in {path}: {e}") from e

        logger.debug(f"Loaded snapshot from {path}")
        return cls.from_dict(document)

    # ------------------------------------------------------------------
    # Metadata port
    # ------------------------------------------------------------------

    def iter_methods(self) -> Iterable[MethodDeclaration]:
        return iter(self.methods)

    def find_method(self, owner: str, name: str) -> Optional[MethodDeclaration]:
        """First method called ``name`` declared by ``owner``."""
        for method in self._methods_by_owner.get(owner, []):
            if method.name == name:
                return method
        return None

    def describe_method(self, node: MethodDeclaration) -> MethodSignature:
        owner = self.classes.get(node.owner)

        if node.suspend:
            continuation = node.parameters[-1].type
            shape = Suspending(continuation.args[0])
        else:
            shape = None

        return MethodSignature(
            name=node.name,
            owner=node.owner,
            owner_is_interface=owner is not None and owner.is_interface,
            return_type=node.return_type,
            parameters=node.parameters,
            annotations=self._merged_annotations(node),
            call_shape=shape,
        )

    def _merged_annotations(self, node: MethodDeclaration) -> FrozenSet[str]:
        """Annotations of the method and of the methods it overrides."""
        annotations = set(node.annotations)
        owner = self.classes.get(node.owner)
        if owner is None:
            return frozenset(annotations)

        visited: Set[str] = {owner.name}
        pending = [sup.name for sup in owner.supertypes]
        while pending:
            name = pending.pop(0)
            if name in visited:
                continue
            visited.add(name)

            for method in self._methods_by_owner.get(name, []):
                if method.name == node.name and len(method.parameters) == len(node.parameters):
                    annotations.update(method.annotations)

            definition = self.classes.get(name)
            if definition is not None:
                pending.extend(sup.name for sup in definition.supertypes)

        return frozenset(annotations)

    # ------------------------------------------------------------------
    # Type-resolution port
    # ------------------------------------------------------------------

    def resolve_class(self, ref: ClassType) -> Optional[ClassDefinition]:
        return self.classes.get(ref.name)


class SnapshotParser:
    """Parses snapshot documents into a SnapshotHost"""

    KINDS = ("class", "interface", "enum")

    def __init__(self):
        self._known: Set[str] = set()
        self._by_simple_name: Dict[str, List[str]] = {}

    def parse(self, document: Dict[str, Any]) -> SnapshotHost:
        """
        Parse a snapshot document

        Args:
            document: Parsed JSON snapshot

        Returns:
            SnapshotHost with all classes and methods

        Raises:
            SnapshotError: If the document is malformed
        """
        if not isinstance(document, dict) or not isinstance(document.get("classes"), list):
            raise SnapshotError("Snapshot must be an object with a 'classes' list")

        class_entries = document["classes"]
        for entry in class_entries:
            self._register(entry)

        classes: Dict[str, ClassDefinition] = {}
        methods: List[MethodDeclaration] = []
        for entry in class_entries:
            definition = self._parse_class(entry)
            classes[definition.name] = definition
            methods.extend(self._parse_methods(entry, definition))

        logger.info(f"Parsed snapshot: {len(classes)} classes, {len(methods)} methods")
        return SnapshotHost(classes, methods)

    def _register(self, entry: Dict[str, Any]) -> None:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str) or not entry["name"]:
            raise SnapshotError(f"Class entry without a name: {entry!r}")

        name = entry["name"]
        if name in self._known:
            raise SnapshotError(f"Duplicate class: {name}")
        kind = entry.get("kind", "class")
        if kind not in self.KINDS:
            raise SnapshotError(f"{name}: unknown kind '{kind}'")

        self._known.add(name)
        simple = name.rsplit(".", 1)[-1]
        self._by_simple_name.setdefault(simple, []).append(name)

    @staticmethod
    def _list_of(entry: Dict[str, Any], key: str, item_type: type, context: str) -> list:
        """List under ``key`` whose items are all of ``item_type`` (missing means empty)."""
        if key not in entry:
            return []
        value = entry[key]
        if not isinstance(value, list) or not all(isinstance(item, item_type) for item in value):
            kind = "objects" if item_type is dict else "strings"
            raise SnapshotError(f"{context}: '{key}' must be a list of {kind}")
        return value

    def _resolver_for(self, class_name: str):
        """Name resolution in the scope of one class: its package first."""
        package = class_name.rsplit(".", 1)[0] if "." in class_name else ""

        def resolve(written: str) -> str:
            if written in self._known:
                return written
            if package and f"{package}.{written}" in self._known:
                return f"{package}.{written}"
            candidates = self._by_simple_name.get(written, [])
            if len(candidates) == 1:
                return candidates[0]
            return written

        return resolve

    def _parse_type(self, text: Any, context: str, scope: Iterable[str], class_name: str) -> TypeRef:
        if not isinstance(text, str):
            raise SnapshotError(f"{context}: missing or invalid type")
        try:
            return TypeParser(scope, self._resolver_for(class_name)).parse(text)
        except TypeSyntaxError as e:
            raise SnapshotError(f"{context}: {e}") from e

    def _parse_class(self, entry: Dict[str, Any]) -> ClassDefinition:
        name = entry["name"]
        kind = entry.get("kind", "class")
        type_parameters = tuple(self._list_of(entry, "type_parameters", str, name))

        supertypes = []
        for text in self._list_of(entry, "supertypes", str, name):
            supertype = self._parse_type(text, f"{name} supertype", type_parameters, name)
            if not isinstance(supertype, ClassType):
                raise SnapshotError(f"{name}: supertype '{text}' is not a class")
            supertypes.append(supertype)

        fields = []
        for field_spec in self._list_of(entry, "fields", dict, name):
            field_name = field_spec.get("name")
            if not isinstance(field_name, str) or not field_name:
                raise SnapshotError(f"{name}: field without a name")

            enum_constant = bool(field_spec.get("enum_constant", False))
            type_text = field_spec.get("type")
            if type_text is None and enum_constant:
                field_type = ClassType(name)
            else:
                field_type = self._parse_type(
                    type_text, f"{name}.{field_name}", type_parameters, name
                )

            fields.append(FieldDefinition(
                name=field_name,
                type=field_type,
                owner=name,
                is_static=bool(field_spec.get("static", False)) or enum_constant,
                is_enum_constant=enum_constant,
            ))

        return ClassDefinition(
            name=name,
            kind=kind,
            type_parameters=type_parameters,
            fields=tuple(fields),
            supertypes=tuple(supertypes),
        )

    def _parse_methods(
        self, entry: Dict[str, Any], definition: ClassDefinition
    ) -> List[MethodDeclaration]:
        methods = []
        for method_spec in self._list_of(entry, "methods", dict, definition.name):
            method_name = method_spec.get("name")
            if not isinstance(method_name, str) or not method_name:
                raise SnapshotError(f"{definition.name}: method without a name")

            context = f"{definition.name}.{method_name}"
            scope = definition.type_parameters + tuple(
                self._list_of(method_spec, "type_parameters", str, context)
            )

            return_text = method_spec.get("return_type")
            return_type = None
            if return_text is not None:
                return_type = self._parse_type(return_text, context, scope, definition.name)

            parameters = []
            for index, param_spec in enumerate(self._list_of(method_spec, "parameters", dict, context)):
                param_name = param_spec.get("name", f"p{index}")
                if not isinstance(param_name, str):
                    raise SnapshotError(f"{context}: parameter {index} has an invalid name")
                parameters.append(ParameterInfo(
                    name=param_name,
                    type=self._parse_type(
                        param_spec.get("type"), f"{context}({param_name})", scope, definition.name
                    ),
                    annotations=frozenset(
                        self._list_of(param_spec, "annotations", str, f"{context}({param_name})")
                    ),
                ))

            suspend = bool(method_spec.get("suspend", False))
            if suspend:
                last = parameters[-1].type if parameters else None
                if not isinstance(last, ClassType) or not last.args:
                    raise SnapshotError(
                        f"{context}: suspend method must end with a Continuation<T> parameter"
                    )

            methods.append(MethodDeclaration(
                owner=definition.name,
                name=method_name,
                return_type=return_type,
                parameters=tuple(parameters),
                annotations=frozenset(self._list_of(method_spec, "annotations", str, context)),
                suspend=suspend,
            ))
        return methods
