"""
Affordance kernel test configuration.

Kernel tests are pure and synchronous apart from the file writer, which
uses function-scoped event loops (asyncio_mode = strict, mark explicitly).
"""

import sys
import textwrap

import pytest

CATALOG_MODULE = textwrap.dedent(
    """
    from pydantic import BaseModel

    from affordance import NumberNode, StringNode, define_collection, obj


    class Product(BaseModel):
        id: int
        name: str
        price: float


    SCHEMA = obj(id=StringNode(), name=StringNode(), price=NumberNode())
    PRODUCTS = define_collection(Product, {"affordances": {"bulk_delete": True}})
    NOT_A_SCHEMA = 42
    """
)


@pytest.fixture
def catalog_module(tmp_path, monkeypatch):
    """
    A throwaway importable module `catalog_models` in tmp_path, with the
    working directory switched to it. Returns the module name.
    """
    (tmp_path / "catalog_models.py").write_text(CATALOG_MODULE, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "catalog_models", raising=False)
    yield "catalog_models"
    sys.modules.pop("catalog_models", None)
