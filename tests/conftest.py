"""
Shared test fixtures for the NOM-035 dashboard core.
"""
import pytest

from core.data import SAMPLE_DATA, clear_dashboard_cache
from core.models import Dataset
from tests.utils import NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def sample_dataset():
    return Dataset.from_dict(SAMPLE_DATA, source="sample")


@pytest.fixture
def fresh_cache():
    clear_dashboard_cache()
    yield
    clear_dashboard_cache()
