"""specflat -- flatten OpenAPI 3.x / Swagger 2.0 documents and project their schemas.

Converting a document rewrites every ``$ref`` to the stable ID of its target
and emits each component once in a flat, ID-addressed store. Views built
from the store expand references into field-name -> type trees, cutting
cycles with a ``"circular-ref"`` marker.

Typical usage::

    from specflat import convert, to_simplified_view

    result = convert(open("petstore.yaml").read())
    if result.success:
        view = to_simplified_view(result.data)
        print(view.endpoints["GET /pets"].response_fields)

Modules:
    parser: Loading, normalization and the ``convert`` entry point.
    views: Schema resolution, field projection, view building.
    models: Pydantic models shared across the package.
    app: Typer application and CLI entry point.
    config: XDG-aware configuration with precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"

from specflat.parser import convert  # noqa: E402
from specflat.views import to_field_view, to_simplified_view  # noqa: E402

__all__ = ["__version__", "convert", "to_field_view", "to_simplified_view"]
