import pytest

from atelier.infrastructure.catalog.option_catalog_store import StaticOptionCatalog

from fakes import ScriptedProvider


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
def catalog() -> StaticOptionCatalog:
    return StaticOptionCatalog()
