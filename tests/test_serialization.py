import pytest

from travel.exceptions import SerializationError
from travel.serialization import MAX_DEPTH, resolve_references


def test_plain_json_is_returned_unchanged():
    payload = [{'id': 1, 'name': 'Paris'}, {'id': 2, 'name': 'Rome'}]
    assert resolve_references(payload) == payload


def test_values_wrapper_is_unwrapped_and_ids_dropped():
    payload = {'$id': '1', '$values': [{'$id': '2', 'id': 1, 'name': 'Paris'}]}
    assert resolve_references(payload) == [{'id': 1, 'name': 'Paris'}]


def test_ref_points_to_the_same_object():
    payload = {'$id': '1', '$values': [
        {'$id': '2', 'id': 10, 'guide': {'$id': '3', 'id': 5, 'name': 'Marta'}},
        {'$id': '4', 'id': 11, 'guide': {'$ref': '3'}},
    ]}
    trips = resolve_references(payload)
    assert trips[0]['guide'] is trips[1]['guide']
    assert trips[1]['guide']['name'] == 'Marta'


def test_cycles_are_preserved():
    payload = {'$id': '1', 'name': 'Trip', 'destination': {'$id': '2', 'trips': {'$id': '3', '$values': [{'$ref': '1'}]}}}
    trip = resolve_references(payload)
    assert trip['destination']['trips'][0] is trip


def test_unknown_ref_raises():
    with pytest.raises(SerializationError):
        resolve_references({'$id': '1', 'other': {'$ref': '99'}})


def test_depth_limit_is_enforced():
    node = {'leaf': True}
    for _ in range(MAX_DEPTH + 1):
        node = {'child': node}
    with pytest.raises(SerializationError, match='maximum allowed depth'):
        resolve_references(node)


def test_depth_within_limit_is_accepted():
    node = {'leaf': True}
    for _ in range(10):
        node = {'child': node}
    assert resolve_references(node, max_depth=MAX_DEPTH)['child']['child']

