"""
HTTP endpoint markers for Python API interfaces.

```python
class UserApi(Protocol):
    @GET("users/{id}")
    def get_user(self, id: int) -> Call[User]: ...

    @POST("users")
    async def create_user(self, user: Annotated[NewUser, Body]) -> User: ...
```
"""

ANNOTATIONS_ATTR = "__http_annotations__"


def _endpoint(verb: str):
    def factory(path: str = ""):
        def decorator(func):
            names = getattr(func, ANNOTATIONS_ATTR, ())
            setattr(func, ANNOTATIONS_ATTR, names + (verb,))
            setattr(func, "__http_path__", path)
            return func
        return decorator
    factory.__name__ = verb
    return factory


GET = _endpoint("GET")
POST = _endpoint("POST")
PUT = _endpoint("PUT")
DELETE = _endpoint("DELETE")


class Body:
    """Marks the request body parameter: ``Annotated[Dto, Body]``."""


def annotation_names(func) -> tuple:
    """Endpoint annotations recorded on a function."""
    return getattr(func, ANNOTATIONS_ATTR, ())
