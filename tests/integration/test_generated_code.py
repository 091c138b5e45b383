"""Integration tests that import and exercise the generated DAO and DTO modules."""

import json
import pytest
import queue
from awslabs.cql_dao_generator.codegen import generate
from datetime import datetime, timezone
from uuid import uuid4


STREAM_TIMEOUT = 5


@pytest.fixture
def generated(project_dir, generation_output_dir, import_generated):
    """Generate the fixture configuration and return an importer for its modules."""
    result = generate(
        search_dir=str(project_dir), output_dir=str(generation_output_dir), no_format=True
    )
    assert result.success, result.error_message
    return import_generated


@pytest.fixture
def events(generated):
    return generated('gen_dao.events_dao_gen')


@pytest.fixture
def readings(generated):
    return generated('gen_dao.sensor_readings_dao_gen')


@pytest.fixture
def tag_types(generated):
    return generated('tag_types')


def _drain(stream):
    items = []
    while True:
        item = stream.get(timeout=STREAM_TIMEOUT)
        items.append(item)
        if item is None:
            return items


def _tag_blob(label, weight=0):
    return f'{{"label":"{label}","weight":{weight}}}'.encode()


@pytest.mark.integration
class TestEventsDao:
    def test_module_surface(self, events):
        assert events.STREAM_END is None
        assert events.DEFAULT_CAPACITY == 100
        assert events.TABLE_NAME == 'events'
        assert events.EventStream._fields == ('dto', 'err')

    def test_create_table(self, events, fake_session):
        session = fake_session()
        events.EventDao(lambda: session).create_table()
        assert session.executed == [
            'CREATE TABLE IF NOT EXISTS app.events (\n'
            '    id uuid,\n'
            '    ts timestamp,\n'
            '    tags list<blob>,\n'
            '    PRIMARY KEY (id, ts)\n'
            ') WITH CLUSTERING ORDER BY (ts DESC);'
        ]
        assert session.is_shutdown

    def test_insert_serializes_tags(self, events, tag_types, fake_session):
        session = fake_session()
        event = events.Event(
            id=uuid4(), ts=datetime(2024, 1, 1, tzinfo=timezone.utc), tags=[tag_types.Tag(label='a', weight=2)]
        )
        assert events.EventDao(lambda: session, page_size=7).insert(event) is event

        statement = session.executed[0]
        assert statement.cql == 'INSERT INTO app.events (id, ts, tags) VALUES (?, ?, ?);'
        assert statement.params == (event.id, event.ts, [_tag_blob('a', 2)])
        assert statement.fetch_size == 7

    def test_insert_skips_unserializable_elements(self, events, tag_types, fake_session):
        session = fake_session()
        event = events.Event(id=uuid4(), tags=[tag_types.Tag(label='a')])
        event.tags.append(object())
        events.EventDao(lambda: session).insert(event)
        assert session.executed[0].params[2] == [_tag_blob('a')]

    def test_get_single_row(self, events, fake_session):
        key, ts = uuid4(), datetime(2024, 1, 1)
        session = fake_session(rows=[(key, ts, [_tag_blob('a'), b'not json'])])
        dto = events.EventDao(lambda: session).get(key, ts)

        assert dto.id == key
        assert dto.ts == ts
        assert [t.label for t in dto.tags] == ['a']
        statement = session.executed[0]
        assert statement.cql == 'SELECT id, ts, tags FROM app.events WHERE id=? AND ts=?;'
        assert statement.params == (key, ts)

    def test_get_missing_row(self, events, fake_session):
        assert events.EventDao(lambda: fake_session()).get(uuid4(), datetime(2024, 1, 1)) is None

    def test_get_more_than_one_row(self, events, fake_session):
        key = uuid4()
        session = fake_session(rows=[(key, None, None), (key, None, None)])
        with pytest.raises(LookupError, match='found 2'):
            events.EventDao(lambda: session).get(key, None)

    def test_null_columns(self, events, fake_session):
        session = fake_session(rows=[(None, None, None)])
        dto = events.EventDao(lambda: session).list_partition(None)[0]
        assert dto.id is None
        assert dto.ts is None
        assert dto.tags == []

    def test_explicit_session_is_not_shut_down(self, events, fake_session):
        def no_factory():
            raise AssertionError('session factory must not be called')

        session = fake_session()
        dao = events.EventDao(no_factory)
        dao.list_partition(uuid4(), session=session)
        dao.delete(events.Event(id=uuid4()), session=session)
        assert len(session.executed) == 2
        assert not session.is_shutdown

    def test_scoped_session_is_shut_down_on_error(self, events, fake_session):
        session = fake_session(error=RuntimeError('unavailable'))
        with pytest.raises(RuntimeError, match='unavailable'):
            events.EventDao(lambda: session).list_partition(uuid4())
        assert session.is_shutdown

    def test_delete_binds_full_key(self, events, fake_session):
        session = fake_session()
        event = events.Event(id=uuid4(), ts=datetime(2024, 1, 1))
        events.EventDao(lambda: session).delete(event)
        statement = session.executed[0]
        assert statement.cql == 'DELETE FROM app.events WHERE id=? AND ts=?;'
        assert statement.params == (event.id, event.ts)


@pytest.mark.integration
class TestStreamPartition:
    def test_rows_then_end(self, events, fake_session):
        key = uuid4()
        session = fake_session(rows=[(key, None, [_tag_blob('a')]), (key, None, [])])
        items = _drain(events.EventDao(lambda: session).stream_partition(key))

        assert len(items) == 3
        assert [item.err for item in items[:2]] == [None, None]
        assert [t.label for t in items[0].dto.tags] == ['a']
        assert items[2] is events.STREAM_END
        assert session.is_shutdown

    def test_failure_mid_iteration(self, events, fake_session):
        key = uuid4()

        def rows():
            yield (key, None, [])
            raise RuntimeError('page fetch failed')

        session = fake_session(rows=rows())
        items = _drain(events.EventDao(lambda: session).stream_partition(key))

        assert len(items) == 3
        assert items[0].dto.id == key
        assert items[1].dto is None
        assert str(items[1].err) == 'page fetch failed'
        assert items[2] is None

    def test_session_factory_failure(self, events):
        def factory():
            raise ConnectionError('no hosts')

        items = _drain(events.EventDao(factory).stream_partition(uuid4()))
        assert len(items) == 2
        assert isinstance(items[0].err, ConnectionError)
        assert items[1] is None

    def test_capacity_bounds_the_queue(self, events, fake_session):
        stream = events.EventDao(lambda: fake_session(), capacity=3).stream_partition(uuid4())
        assert isinstance(stream, queue.Queue)
        assert stream.maxsize == 3
        assert _drain(stream) == [None]


@pytest.mark.integration
class TestReadingsDao:
    def test_composite_partition_and_collections(self, readings, fake_session):
        session = fake_session(
            rows=[('a', 1, None, None, {'x': _tag_blob('x', 3), 'y': b'{'}, None)]
        )
        dto = readings.ReadingDao(lambda: session).list_partition('a', 1)[0]

        assert dto.k1 == 'a'
        assert dto.k2 == 1
        assert dto.value == 0.0
        assert dto.labels == []
        assert dto.raw == {}
        assert list(dto.attributes) == ['x']
        assert dto.attributes['x'].weight == 3
        assert session.executed[0].params == ('a', 1)

    def test_insert_serializes_map_values(self, readings, tag_types, fake_session):
        session = fake_session()
        reading = readings.Reading(
            k1='a', k2=1, value=1.5, labels=['l'], attributes={'x': tag_types.Tag(label='x')}, raw={'r': b'1'}
        )
        readings.ReadingDao(lambda: session).insert(reading)
        assert session.executed[0].params == ('a', 1, 1.5, ['l'], {'x': _tag_blob('x')}, {'r': b'1'})

    def test_dto_accepts_aliases(self, readings):
        reading = readings.Reading.model_validate({'k1': 'a', 'k2': 2})
        assert reading.model_dump(by_alias=True)['k2'] == 2
        assert reading.value == 0.0


@pytest.mark.integration
class TestColumnsNamedLikeGeneratedCodeNames:
    """Key columns become method parameters; the generated bodies must still work."""

    @pytest.fixture
    def jobs(self, tmp_path, generation_output_dir, import_generated, single_table_data):
        data = single_table_data(
            columns=[
                {'name': 'queue', 'type': 'text', 'key': 'partition'},
                {'name': 'threading', 'type': 'text', 'key': 'partition'},
                {'name': 'len', 'type': 'int', 'key': 'cluster'},
                {'name': 'LookupError', 'type': 'text'},
            ],
            ModelGeneration={'Package': 'gen_models', 'Location': 'gen_models'},
        )
        data['tables'][0].update(
            {'modelName': 'Job', 'tableName': 'jobs', 'dao': 'JobDao', 'generatedName': 'Jobs'}
        )
        (tmp_path / 'persist-config.json').write_text(json.dumps(data))
        result = generate(
            search_dir=str(tmp_path), output_dir=str(generation_output_dir), no_format=True
        )
        assert result.success, result.error_message
        return import_generated('gen_dao.jobs_dao_gen')

    def test_stream_partition(self, jobs, fake_session):
        session = fake_session(rows=[('a', 'b', 1, 'x')])
        items = _drain(jobs.JobDao(lambda: session, capacity=2).stream_partition('a', 'b'))

        assert len(items) == 2
        assert items[0].err is None
        assert items[0].dto.queue == 'a'
        assert items[0].dto.threading == 'b'
        assert items[1] is jobs.STREAM_END
        assert session.executed[0].params == ('a', 'b')

    def test_get(self, jobs, fake_session):
        session = fake_session(rows=[('a', 'b', 1, 'x')])
        dto = jobs.JobDao(lambda: session).get('a', 'b', 1)
        assert dto.len == 1
        assert session.executed[0].params == ('a', 'b', 1)

    def test_get_more_than_one_row(self, jobs, fake_session):
        session = fake_session(rows=[('a', 'b', 1, 'x'), ('a', 'b', 1, 'y')])
        with pytest.raises(LookupError, match='found 2'):
            jobs.JobDao(lambda: session).get('a', 'b', 1)
