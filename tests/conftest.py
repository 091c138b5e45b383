"""Shared fixtures for cql_dao_generator tests."""

import copy
import json
import pytest
import sys
from awslabs.cql_dao_generator.core.schema_definitions import PersistConfig
from pathlib import Path


# ============================================================================
# MODULE CONSTANTS
# ============================================================================

FIXTURES_DIR = Path(__file__).parent / 'fixtures'
PERSIST_CONFIG = FIXTURES_DIR / 'persist-config.json'
BOILERPLATE = FIXTURES_DIR / 'boilerplate.j2'
LEGACY_MODEL = FIXTURES_DIR / 'Events.json'

# Columns of the events table, as written in a configuration file.
SCENARIO_COLUMNS = [
    {'name': 'id', 'type': 'uuid', 'key': 'partition'},
    {'name': 'ts', 'type': 'timestamp', 'key': 'cluster-desc'},
    {'name': 'tags', 'type': 'list<blob>', 'key': 'cluster-none', 'deserializeTo': 'Tag'},
]

# Module prefixes created by importing generated code.
GENERATED_MODULE_PREFIXES = ('gen_dao', 'gen_models', 'tag_types')

TAG_TYPES_SOURCE = '''
from pydantic import BaseModel


class Tag(BaseModel):
    label: str
    weight: int = 0
'''


# ============================================================================
# SHARED FIXTURES
# ============================================================================


@pytest.fixture
def persist_config_data():
    """Raw persist configuration document (a fresh copy per test)."""
    return copy.deepcopy(json.loads(PERSIST_CONFIG.read_text()))


@pytest.fixture
def persist_config(persist_config_data):
    """Parsed two-table persist configuration."""
    return PersistConfig.model_validate(persist_config_data)


@pytest.fixture
def single_table_data():
    """Minimal one-table configuration built around the events columns."""

    def _make(columns=None, **overrides):
        data = {
            'keyspace': 'app',
            'package': 'gen_dao',
            'tables': [
                {
                    'modelName': 'Event',
                    'tableName': 'events',
                    'dao': 'EventDao',
                    'generatedName': 'Events',
                    'columns': copy.deepcopy(SCENARIO_COLUMNS if columns is None else columns),
                }
            ],
        }
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def project_dir(tmp_path, persist_config_data):
    """Working directory holding persist-config.json and the boilerplate template."""
    directory = tmp_path / 'project'
    directory.mkdir()
    persist_config_data['boilerplate'] = 'boilerplate.j2'
    (directory / 'persist-config.json').write_text(json.dumps(persist_config_data))
    (directory / 'boilerplate.j2').write_text(BOILERPLATE.read_text())
    return directory


# ============================================================================
# INTEGRATION TEST SPECIFIC FIXTURES
# ============================================================================


@pytest.fixture
def generation_output_dir(tmp_path):
    """Clean temporary directory for integration test file generation."""
    output_dir = tmp_path / 'generated_output'
    output_dir.mkdir()
    return output_dir


@pytest.fixture
def import_generated(generation_output_dir, monkeypatch):
    """Import generated modules from the output directory.

    The deserialize target module ``tag_types`` is written next to the
    generated packages. Imported modules are dropped from ``sys.modules``
    afterwards so every test sees its own generated code.
    """
    import importlib

    (generation_output_dir / 'tag_types.py').write_text(TAG_TYPES_SOURCE)
    monkeypatch.syspath_prepend(str(generation_output_dir))

    def _import(module_name: str):
        importlib.invalidate_caches()
        return importlib.import_module(module_name)

    yield _import

    for name in list(sys.modules):
        if name.startswith(GENERATED_MODULE_PREFIXES):
            del sys.modules[name]


class FakeStatement:
    """Bound statement as produced by ``PreparedStatement.bind``."""

    def __init__(self, cql, params):
        self.cql = cql
        self.params = tuple(params)
        self.fetch_size = None


class FakePrepared:
    def __init__(self, cql):
        self.cql = cql

    def bind(self, params):
        return FakeStatement(self.cql, params)


class FakeSession:
    """In-memory stand-in for ``cassandra.cluster.Session``.

    ``rows`` is returned (as an iterator) from every SELECT; it may be a
    generator that raises to simulate a failing page fetch.
    """

    def __init__(self, rows=(), error=None):
        self.rows = rows
        self.error = error
        self.executed = []
        self.is_shutdown = False

    def prepare(self, cql):
        return FakePrepared(cql)

    def execute(self, statement):
        self.executed.append(statement)
        if self.error is not None:
            raise self.error
        if isinstance(statement, FakeStatement) and statement.cql.startswith('SELECT'):
            return iter(self.rows)
        return iter(())

    def shutdown(self):
        self.is_shutdown = True


@pytest.fixture
def fake_session():
    """Factory of fake sessions."""
    return FakeSession
