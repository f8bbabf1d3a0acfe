"""Naming variants derived from a free-form library name.

``derive_naming("product-category")`` yields the four identifiers every
generated file refers to::

    class_name     ProductCategory
    property_name  productCategory
    file_name      product-category
    constant_name  PRODUCT_CATEGORY

Words are split on any run of non-alphanumeric characters and on every
lowercase-to-uppercase transition, so names that are already in one of the
supported cases derive to themselves.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidNameError

_CASE_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


class NamingVariants(BaseModel):
    """Case variants of one library name.  Computed once, never recomputed."""

    model_config = ConfigDict(frozen=True)

    original: str = Field(..., description="Name exactly as supplied")
    class_name: str = Field(..., description="PascalCase, for classes and types")
    property_name: str = Field(..., description="camelCase, for values")
    file_name: str = Field(..., description="kebab-case, for paths")
    constant_name: str = Field(..., description="SCREAMING_SNAKE_CASE, for constants")


def split_words(name: str) -> list[str]:
    """Split *name* into words on separators and case transitions.

    Examples::

        split_words("ProductCategory")   -> ["Product", "Category"]
        split_words("user_profile v2")   -> ["user", "profile", "v2"]
    """
    spaced = _CASE_BOUNDARY.sub(r"\1 \2", name)
    return [word for word in _SEPARATORS.split(spaced) if word]


def derive_naming(name: str) -> NamingVariants:
    """Derive all naming variants for *name*.

    Raises:
        InvalidNameError: If the name is blank, has no alphanumeric content,
            or starts with a digit.
    """
    if not name or not name.strip():
        raise InvalidNameError(name, "name is required and cannot be empty")

    words = split_words(name)
    if not words:
        raise InvalidNameError(name, "name must contain letters or digits")
    if words[0][0].isdigit():
        raise InvalidNameError(name, "name must start with a letter")

    class_name = "".join(word[0].upper() + word[1:] for word in words)
    return NamingVariants(
        original=name,
        class_name=class_name,
        property_name=class_name[0].lower() + class_name[1:],
        file_name="-".join(word.lower() for word in words),
        constant_name="_".join(word.upper() for word in words),
    )


def entity_file_name(entity: str) -> str:
    """Return the kebab-case file name for a contract entity."""
    return derive_naming(entity).file_name
