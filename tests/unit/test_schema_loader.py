"""Unit tests for SchemaLoader."""

import json
import pytest
from awslabs.cql_dao_generator.core.errors import ConfigurationError
from awslabs.cql_dao_generator.core.schema_loader import SchemaLoader, parse_persist_config
from tests.conftest import LEGACY_MODEL


@pytest.mark.unit
class TestSchemaLoader:
    def test_reads_config_from_search_dir(self, project_dir):
        config = SchemaLoader(search_dir=project_dir).parse()
        assert config.keyspace == 'app'
        assert len(config.tables) == 2

    def test_falls_back_to_config_subdirectory(self, tmp_path, persist_config_data):
        (tmp_path / 'config').mkdir()
        (tmp_path / 'config' / 'persist-config.json').write_text(json.dumps(persist_config_data))
        loader = SchemaLoader(search_dir=tmp_path)
        assert loader.locate() == tmp_path / 'config' / 'persist-config.json'
        assert loader.parse().package == 'gen_dao'

    def test_working_directory_wins_over_config_subdirectory(self, tmp_path, persist_config_data):
        (tmp_path / 'config').mkdir()
        (tmp_path / 'config' / 'persist-config.json').write_text(json.dumps(persist_config_data))
        persist_config_data['keyspace'] = 'top'
        (tmp_path / 'persist-config.json').write_text(json.dumps(persist_config_data))
        assert SchemaLoader(search_dir=tmp_path).parse().keyspace == 'top'

    def test_search_dir_defaults_to_cwd(self, project_dir, monkeypatch):
        monkeypatch.chdir(project_dir)
        assert SchemaLoader().parse().keyspace == 'app'

    def test_missing_config(self, tmp_path):
        with pytest.raises(ConfigurationError, match='persist-config.json not found'):
            SchemaLoader(search_dir=tmp_path).parse()

    def test_explicit_path_must_exist(self, tmp_path):
        with pytest.raises(ConfigurationError, match='Persist configuration not found'):
            SchemaLoader(tmp_path / 'missing.json').parse()

    @pytest.mark.parametrize('content', ['', '{}', 'null', '[1, 2]', '{"keyspace": '])
    def test_empty_or_malformed_config(self, tmp_path, content):
        path = tmp_path / 'persist-config.json'
        path.write_text(content)
        with pytest.raises(ConfigurationError):
            SchemaLoader(path).parse()

    def test_structural_errors_are_reported_with_locations(self, tmp_path):
        path = tmp_path / 'persist-config.json'
        path.write_text(json.dumps({'keyspace': 'ks', 'tables': [{'columns': [{'name': 'a'}]}]}))
        with pytest.raises(ConfigurationError, match=r'tables\[0\]\.columns\[0\]\.type'):
            SchemaLoader(path).parse()

    def test_parse_leaves_semantic_checks_to_the_validator(self, tmp_path, single_table_data):
        path = tmp_path / 'persist-config.json'
        path.write_text(json.dumps(single_table_data(tables=[])))
        assert SchemaLoader(path).parse().tables == []


@pytest.mark.unit
class TestLegacyMode:
    def test_builds_one_table_config(self, tmp_path):
        (tmp_path / 'Events.json').write_text(LEGACY_MODEL.read_text())
        config = SchemaLoader(search_dir=tmp_path).parse_legacy(
            'Events', 'EventsDao', keyspace='ks', package='app.dao'
        )
        assert config.keyspace == 'ks'
        assert config.package == 'app.dao'
        table = config.tables[0]
        assert table.model_name == 'Events'
        assert table.dao_name == 'EventsDao'
        assert table.table_name == 'events'
        assert table.generated_name == 'Events'
        assert [c.name for c in table.columns] == ['id', 'ts', 'body']

    def test_table_name_override_and_config_dir(self, tmp_path):
        (tmp_path / 'config').mkdir()
        (tmp_path / 'config' / 'Events.json').write_text(LEGACY_MODEL.read_text())
        config = SchemaLoader(search_dir=tmp_path).parse_legacy('Events', 'EventsDao', table='ev')
        assert config.tables[0].table_name == 'ev'

    def test_model_file_must_be_an_array(self, tmp_path):
        (tmp_path / 'Events.json').write_text('{"name": "id"}')
        with pytest.raises(ConfigurationError, match='array of column definitions'):
            SchemaLoader(search_dir=tmp_path).parse_legacy('Events', 'EventsDao')

    def test_missing_model_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match='Events.json not found'):
            SchemaLoader(search_dir=tmp_path).parse_legacy('Events', 'EventsDao')


@pytest.mark.unit
class TestBoilerplate:
    def test_no_boilerplate(self, persist_config, tmp_path):
        assert SchemaLoader(search_dir=tmp_path).load_boilerplate(persist_config) == ''

    def test_reads_boilerplate_text(self, project_dir):
        loader = SchemaLoader(search_dir=project_dir)
        text = loader.load_boilerplate(loader.parse())
        assert 'TABLE_NAME' in text

    def test_resolves_next_to_explicit_config(self, project_dir, tmp_path):
        loader = SchemaLoader(project_dir / 'persist-config.json', search_dir=tmp_path)
        assert 'TABLE_NAME' in loader.load_boilerplate(loader.parse())

    def test_missing_boilerplate_is_fatal(self, project_dir):
        (project_dir / 'boilerplate.j2').unlink()
        loader = SchemaLoader(search_dir=project_dir)
        with pytest.raises(ConfigurationError, match='Boiler plate template did not exist'):
            loader.load_boilerplate(loader.parse())


@pytest.mark.unit
class TestParsePersistConfig:
    def test_rejects_non_object(self):
        with pytest.raises(ConfigurationError, match='must be a JSON object'):
            parse_persist_config(['tables'])

    def test_rejects_empty(self):
        with pytest.raises(ConfigurationError, match='empty'):
            parse_persist_config({})
