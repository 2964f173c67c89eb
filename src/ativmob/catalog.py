"""Embedded sample product list and its text filter."""

from __future__ import annotations

from collections.abc import Sequence

from ativmob.models.catalog import Product


def build_sample_products(count: int = 20) -> tuple[Product, ...]:
    """``Produto 1`` .. ``Produto N`` with matching descriptions."""
    return tuple(
        Product(id=n, name=f"Produto {n}", description=f"Descrição do produto número {n}") for n in range(1, count + 1)
    )


def filter_products(products: Sequence[Product], text: str) -> tuple[Product, ...]:
    """Products whose name or description contains *text*, ignoring case.

    A blank filter returns every product.
    """
    if not text.strip():
        return tuple(products)
    needle = text.casefold()
    return tuple(p for p in products if needle in p.name.casefold() or needle in p.description.casefold())


def summary(shown: int, total: int) -> str:
    return f"Mostrando {shown} de {total} produtos"
