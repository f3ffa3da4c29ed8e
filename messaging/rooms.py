from collections import defaultdict


class RoomRegistry:
    """
    Process-local map of group rooms to the websocket connections in them.

    Connections are identified by their channel name. join/leave are plain
    set operations and recipients() is the room minus the sending connection.
    """

    def __init__(self):
        self._rooms = defaultdict(set)

    @staticmethod
    def _key(group_id):
        return str(group_id)

    def join(self, group_id, connection):
        self._rooms[self._key(group_id)].add(connection)

    def leave(self, group_id, connection):
        key = self._key(group_id)
        members = self._rooms.get(key)
        if members is None:
            return
        members.discard(connection)
        if not members:
            del self._rooms[key]

    def leave_all(self, connection):
        """Drop a connection from every room; returns the rooms it was in."""
        left = [key for key, members in self._rooms.items() if connection in members]
        for key in left:
            self.leave(key, connection)
        return left

    def members(self, group_id):
        return frozenset(self._rooms.get(self._key(group_id), ()))

    def recipients(self, group_id, sender):
        return self.members(group_id) - {sender}

    def __len__(self):
        return len(self._rooms)


rooms = RoomRegistry()
