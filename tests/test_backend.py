"""Tests for the SQLite backend and its change feed."""
import pytest

from fieldops.backend.base import ChangeEvent, Query, INSERT, UPDATE, DELETE
from fieldops.exceptions import BackendError


async def _region(backend, name='North'):
    return await backend.insert('regions', {'name': name})


class TestQueries:
    """Tests for reads."""

    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_timestamp(self, backend):
        region = await _region(backend)
        assert region['id']
        assert region['name'] == 'North'
        assert region['created_at']

    @pytest.mark.asyncio
    async def test_filters_order_and_limit(self, backend):
        region = await _region(backend)
        for day in ('2024-06-10', '2024-06-12', '2024-06-14', '2024-06-16'):
            await backend.insert('reports', {'date': day, 'region_id': region['id'], 'total_fuel': 1})

        rows = await backend.select(
            Query('reports').eq('region_id', region['id'])
            .gte('date', '2024-06-11').lte('date', '2024-06-15')
            .order('date', descending=True)
        )
        assert [row['date'] for row in rows] == ['2024-06-14', '2024-06-12']

        rows = await backend.select(Query('reports').order('date').limit(1))
        assert [row['date'] for row in rows] == ['2024-06-10']

    @pytest.mark.asyncio
    async def test_in_filter(self, backend):
        north = await _region(backend, 'North')
        south = await _region(backend, 'South')
        await _region(backend, 'East')

        rows = await backend.select(Query('regions').in_('id', [north['id'], south['id']]))
        assert {row['name'] for row in rows} == {'North', 'South'}
        assert await backend.select(Query('regions').in_('id', [])) == []

    @pytest.mark.asyncio
    async def test_unknown_column(self, backend):
        with pytest.raises(BackendError) as exc_info:
            await backend.select(Query('regions').eq('colour', 'red'))
        assert exc_info.value.code == 'invalid_query'

    @pytest.mark.asyncio
    async def test_unknown_collection(self, backend):
        with pytest.raises(BackendError) as exc_info:
            await backend.select(Query('regions; DROP TABLE regions'))
        assert exc_info.value.code == 'invalid_query'

    @pytest.mark.asyncio
    async def test_json_columns(self, backend):
        region = await _region(backend)
        user = await backend.insert('users', {
            'name': 'Nino', 'email': 'nino@example.com', 'role': 'engineer',
            'assigned_regions': [region['id']],
        })
        assert user['assigned_regions'] == [region['id']]


class TestWrites:
    """Tests for inserts, updates and deletes."""

    @pytest.mark.asyncio
    async def test_update(self, backend):
        region = await _region(backend)
        updated = await backend.update('regions', region['id'], {'name': 'North-East'})
        assert updated['name'] == 'North-East'

    @pytest.mark.asyncio
    async def test_update_missing_row(self, backend):
        with pytest.raises(BackendError) as exc_info:
            await backend.update('regions', 'missing', {'name': 'X'})
        assert exc_info.value.code == 'not_found'

    @pytest.mark.asyncio
    async def test_update_without_fields(self, backend):
        region = await _region(backend)
        with pytest.raises(BackendError) as exc_info:
            await backend.update('regions', region['id'], {'id': 'other'})
        assert exc_info.value.code == 'invalid_query'

    @pytest.mark.asyncio
    async def test_duplicate_region_name(self, backend):
        await _region(backend)
        with pytest.raises(BackendError) as exc_info:
            await _region(backend)
        assert exc_info.value.code == 'unique_violation'

    @pytest.mark.asyncio
    async def test_invalid_fuel_type(self, backend):
        with pytest.raises(BackendError) as exc_info:
            await backend.insert('equipment', {'type': 'Truck', 'license_plate': 'X', 'fuel_type': 'electric'})
        assert exc_info.value.code == 'check_violation'

    @pytest.mark.asyncio
    async def test_delete_referenced_region_refused(self, backend):
        region = await _region(backend)
        await backend.insert('reports', {'date': '2024-06-15', 'region_id': region['id']})

        with pytest.raises(BackendError) as exc_info:
            await backend.delete('regions', region['id'])
        assert exc_info.value.code == 'foreign_key_violation'
        assert len(await backend.select(Query('regions'))) == 1

    @pytest.mark.asyncio
    async def test_delete_missing_row(self, backend):
        with pytest.raises(BackendError) as exc_info:
            await backend.delete('regions', 'missing')
        assert exc_info.value.code == 'not_found'


class TestCreateReport:
    """Tests for the atomic report procedure."""

    @pytest.mark.asyncio
    async def test_creates_report_with_links_and_totals(self, backend):
        region = await _region(backend)
        worker_a = await backend.insert('workers', {'full_name': 'A', 'personal_id': '1', 'daily_salary': 50})
        worker_b = await backend.insert('workers', {'full_name': 'B', 'personal_id': '2', 'daily_salary': 70})
        truck = await backend.insert('equipment', {'type': 'Truck', 'license_plate': 'T-1'})

        report = await backend.rpc('create_report', {
            'report': {'date': '2024-06-15', 'region_id': region['id']},
            'workers': [{'worker_id': worker_a['id']}, {'worker_id': worker_b['id'], 'hours_worked': 6}],
            'equipment': [{'equipment_id': truck['id'], 'fuel_amount': 42.5}],
        })

        assert report['total_fuel'] == 42.5
        assert report['total_worker_salary'] == 120
        assert len(report['workers']) == 2
        assert report['equipment'][0]['report_id'] == report['id']

    @pytest.mark.asyncio
    async def test_failure_writes_nothing(self, backend):
        worker = await backend.insert('workers', {'full_name': 'A', 'personal_id': '1'})

        with pytest.raises(BackendError) as exc_info:
            await backend.rpc('create_report', {
                'report': {'date': '2024-06-15'},
                'workers': [{'worker_id': worker['id']}],
                'equipment': [{'equipment_id': 'no-such-equipment', 'fuel_amount': 10}],
            })

        assert exc_info.value.code == 'foreign_key_violation'
        assert await backend.select(Query('reports')) == []
        assert await backend.select(Query('report_workers')) == []

    @pytest.mark.asyncio
    async def test_unknown_procedure(self, backend):
        with pytest.raises(BackendError) as exc_info:
            await backend.rpc('drop_everything', {})
        assert exc_info.value.code == 'invalid_query'


class TestChangeFeed:
    """Tests for change notifications."""

    @pytest.mark.asyncio
    async def test_events_delivered_after_each_write(self, backend):
        events = []

        async def listener(event):
            events.append(event)

        backend.subscribe('regions', listener)
        region = await _region(backend)
        await backend.update('regions', region['id'], {'name': 'South'})
        await backend.delete('regions', region['id'])

        assert events == [
            ChangeEvent(INSERT, 'regions', region['id']),
            ChangeEvent(UPDATE, 'regions', region['id']),
            ChangeEvent(DELETE, 'regions', region['id']),
        ]

    @pytest.mark.asyncio
    async def test_event_subset_and_other_collections(self, backend):
        events = []

        async def listener(event):
            events.append(event.kind)

        backend.subscribe('regions', listener, events=[DELETE])
        region = await _region(backend)
        await backend.insert('workers', {'full_name': 'A', 'personal_id': '1'})
        await backend.delete('regions', region['id'])

        assert events == [DELETE]

    @pytest.mark.asyncio
    async def test_unsubscribe(self, backend):
        events = []

        async def listener(event):
            events.append(event)

        subscription = backend.subscribe('regions', listener)
        assert backend.feed.listener_count('regions') == 1
        subscription.unsubscribe()
        subscription.unsubscribe()
        assert backend.feed.listener_count('regions') == 0

        await _region(backend)
        assert events == []

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_fail_write(self, backend):
        delivered = []

        async def broken(event):
            raise RuntimeError("listener bug")

        async def healthy(event):
            delivered.append(event)

        backend.subscribe('regions', broken)
        backend.subscribe('regions', healthy)

        region = await _region(backend)
        assert region['name'] == 'North'
        assert len(delivered) == 1
