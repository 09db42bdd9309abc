# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from stockpilot.logging.init import reset_logging
from stockpilot.store.memory import InMemoryProductStore

HEADER = "ID,Référence,Désignation,Catégorie,Fournisseur,Prix achat,Prix vente,Stock actuel,Stock minimum,Stock maximum,Emplacement,Date entrée,Notes"


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def clean_logging(monkeypatch):
    reset_logging()
    monkeypatch.delenv("STOCKPILOT_STORE", raising=False)
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """store:
  backend: memory
  timeout_seconds: 5
  catalog_refresh: per_record
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
  table: products
api:
  base_url: http://localhost:8080/api
import:
  extension: .csv
  encoding: utf-8
  delimiter: ","
  invalid_numbers: nan
  logs_directory: logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "stockpilot.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def csv_header() -> str:
    return HEADER


@pytest.fixture()
def products_csv_text() -> str:
    return "\n".join([
        HEADER,
        '1,A1,"Vis 4x20, inox",Visserie,Acme,"12,50",19.9,7,2,50,R1,2024-01-05,',
        ',B2,Écrou M4,Visserie,"Acme, Inc.",0.8,1.5,120,20,500,R2,2024-01-06,lot 3',
        ",C3,Rondelle,Visserie,Acme,,,,,,R3,,",
    ]) + "\n"


@pytest.fixture()
def products_csv(temp_workdir: Path, products_csv_text: str) -> Path:
    f = temp_workdir / "data" / "products.csv"
    f.write_text(products_csv_text, encoding="utf-8")
    return f


@pytest.fixture()
def catalog_store() -> InMemoryProductStore:
    return InMemoryProductStore([
        {"id": 1, "reference": "A1", "designation": "Vis", "stock_actuel": 3},
        {"id": 7, "reference": "Z9", "designation": "Clou", "stock_actuel": 0},
    ])
