import asyncio
import json
import random

from services.connection import UNJOINED, Connection
from services.coordinator import SignalingCoordinator


class YieldingTransport:
    """Gives the loop away on every send so connection tasks interleave."""

    def __init__(self) -> None:
        self.sent = []
        self.open = True

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_text(self, data: str) -> None:
        await asyncio.sleep(0)
        self.sent.append(data)

    def messages(self) -> list:
        return [json.loads(s) for s in self.sent]


async def check_invariants(coord, conns):
    rooms = await coord.registry.rooms()
    assert all(count > 0 for _, count in rooms)
    members = {}
    for room_id, _ in rooms:
        for ident in await coord.registry.snapshot(room_id):
            assert ident not in members
            members[ident] = room_id
    for c in conns:
        if c.state == UNJOINED:
            assert c.identity not in members
        else:
            assert members.get(c.identity) == c.room_id


def test_interleaved_connections_keep_registry_consistent():
    async def _run():
        coord = SignalingCoordinator()
        conns = [coord.open(YieldingTransport()) for _ in range(8)]

        async def drive(conn, seed):
            rnd = random.Random(seed)
            for _ in range(60):
                op = rnd.choice(["join", "join", "leave", "chat", "signal", "close"])
                if op == "close":
                    await coord.close(conn)
                elif op == "join":
                    await coord.receive(conn, json.dumps({"type": "join", "roomId": rnd.choice(["x", "y", "z"])}))
                elif op == "signal":
                    target = rnd.choice(conns).identity
                    await coord.receive(conn, json.dumps({"type": "signal", "target": target, "data": {"n": seed}}))
                else:
                    await coord.receive(conn, json.dumps({"type": op, "text": "hi"}))
                await asyncio.sleep(0)

        for round_ in range(5):
            await asyncio.gather(*(drive(c, round_ * 100 + i) for i, c in enumerate(conns)))
            await check_invariants(coord, conns)

        for c in conns:
            await coord.close(c)
        assert await coord.registry.rooms() == []
        assert coord.connection_count == 0
    asyncio.run(_run())


def test_leave_racing_close_departs_once():
    async def _run():
        coord = SignalingCoordinator()
        ta, tb, tc = YieldingTransport(), YieldingTransport(), YieldingTransport()
        a, b, c = coord.open(ta), coord.open(tb), coord.open(tc)
        for conn in (a, b, c):
            await coord.receive(conn, json.dumps({"type": "join", "roomId": "r1"}))

        await asyncio.gather(
            coord.receive(b, json.dumps({"type": "leave"})),
            coord.close(b),
            coord.receive(b, json.dumps({"type": "leave"})),
        )

        for t in (ta, tc):
            left = [m for m in t.messages() if m["type"] == "peer-left"]
            assert left == [{"type": "peer-left", "id": b.identity}]
        assert sorted(await coord.registry.snapshot("r1")) == sorted([a.identity, c.identity])
        await check_invariants(coord, [a, b, c])
    asyncio.run(_run())


def test_simultaneous_joins_each_see_a_consistent_roster():
    async def _run():
        coord = SignalingCoordinator()
        transports = [YieldingTransport() for _ in range(6)]
        conns = [coord.open(t) for t in transports]
        await asyncio.gather(*(coord.receive(c, json.dumps({"type": "join", "roomId": "busy"})) for c in conns))

        everyone = {c.identity for c in conns}
        assert set(await coord.registry.snapshot("busy")) == everyone
        for conn, t in zip(conns, transports):
            msgs = t.messages()
            participants = [m for m in msgs if m["type"] == "participants"]
            assert len(participants) == 1
            # everyone is known either from the roster or from a later announcement
            known = set(participants[0]["ids"]) | {m["id"] for m in msgs if m["type"] == "peer-joined"}
            assert known == everyone - {conn.identity}
    asyncio.run(_run())


def test_connection_is_open_follows_transport():
    async def _run():
        t = YieldingTransport()
        conn = Connection("solo", t)
        assert conn.is_open
        assert await conn.send({"type": "x"})
        t.open = False
        assert not conn.is_open
        assert not await conn.send({"type": "y"})
        assert t.messages() == [{"type": "x"}]
    asyncio.run(_run())
