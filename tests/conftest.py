import matplotlib

matplotlib.use("Agg")

import pytest

from calcplot.backend.calculator import Calculator
from calcplot.backend.engine import CalculatorEngine
from calcplot.backend.settings import SettingsStore
from calcplot.backend.theme import ThemeManager


@pytest.fixture
def engine():
    return CalculatorEngine()


@pytest.fixture
def calculator(engine):
    return Calculator(engine)


@pytest.fixture
def store(tmp_path):
    return SettingsStore(tmp_path / "settings.json")


@pytest.fixture
def theme(store):
    return ThemeManager(store)
