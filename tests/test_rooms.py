from messaging.rooms import RoomRegistry


def test_recipients_exclude_the_sender():
    registry = RoomRegistry()
    registry.join(7, 'alice')
    registry.join('7', 'bob')
    registry.join(8, 'carol')

    assert registry.members(7) == {'alice', 'bob'}
    assert registry.recipients('7', 'alice') == {'bob'}
    assert registry.recipients(9, 'alice') == frozenset()


def test_join_is_idempotent_and_leave_drops_empty_rooms():
    registry = RoomRegistry()
    registry.join(1, 'alice')
    registry.join(1, 'alice')
    assert registry.members(1) == {'alice'}

    registry.leave(1, 'alice')
    registry.leave(1, 'alice')
    registry.leave(2, 'nobody')
    assert len(registry) == 0


def test_leave_all_removes_connection_everywhere():
    registry = RoomRegistry()
    for room in (1, 2, 3):
        registry.join(room, 'alice')
    registry.join(2, 'bob')

    left = registry.leave_all('alice')

    assert sorted(left) == ['1', '2', '3']
    assert registry.members(2) == {'bob'}
    assert len(registry) == 1
