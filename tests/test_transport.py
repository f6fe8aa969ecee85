import time
import unittest

from fakes import FakeClock, make_response
from ntpclock.config import ClientConfig
from ntpclock.protocol import NTPClient
from ntpclock.timebase import SystemClock, ticks_add, ticks_diff
from ntpclock.transport import UdpTransport, create_transport
from ntpclock.utils.exceptions import TransportError


class TestTicks(unittest.TestCase):
    def test_diff_without_wrap(self):
        self.assertEqual(ticks_diff(1500, 500), 1000)

    def test_diff_across_wrap(self):
        self.assertEqual(ticks_diff(100, 2**32 - 100), 200)
        self.assertEqual(ticks_diff(10, 65530, width=16), 16)

    def test_add_wraps_both_ways(self):
        self.assertEqual(ticks_add(2**32 - 10, 20), 10)
        self.assertEqual(ticks_add(5, -10), 2**32 - 5)
        self.assertEqual(ticks_add(5, -10, width=8), 251)

    def test_elapsed_since_uses_clock_width(self):
        clock = FakeClock(start=250, width=8)
        clock.advance(10)
        self.assertEqual(clock.now_millis(), 4)
        self.assertEqual(clock.elapsed_since(250), 10)


class TestSystemClock(unittest.TestCase):
    def test_values_fit_width(self):
        clock = SystemClock(width=10)
        for _ in range(5):
            self.assertLess(clock.now_millis(), 1 << 10)

    def test_sleep_advances(self):
        clock = SystemClock()
        start = clock.now_millis()
        clock.sleep_millis(20)
        self.assertGreaterEqual(clock.elapsed_since(start), 15)

    def test_invalid_width(self):
        with self.assertRaises(ValueError):
            SystemClock(width=0)


class TestUdpTransport(unittest.TestCase):
    def setUp(self):
        self.server = UdpTransport("127.0.0.1")
        self.client = UdpTransport("127.0.0.1")
        self.server.open(0)
        self.client.open(0)

    def tearDown(self):
        self.server.close()
        self.client.close()

    def _wait_available(self, transport, timeout=2.0):
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            size = transport.available()
            if size > 0:
                return size
            time.sleep(0.01)
        return 0

    def test_loopback_exchange(self):
        self.assertEqual(self.server.available(), 0)
        payload = bytes(range(48))
        sent = self.client.send_datagram("127.0.0.1", self.server.local_port, payload)
        self.assertEqual(sent, 48)

        self.assertEqual(self._wait_available(self.server), 48)
        self.assertEqual(self.server.read_datagram(48), payload)
        self.assertEqual(self.server.available(), 0)

    def test_read_truncates_to_max_len(self):
        self.client.send_datagram("127.0.0.1", self.server.local_port, b"x" * 60)
        self.assertEqual(self._wait_available(self.server), 60)
        self.assertEqual(self.server.read_datagram(48), b"x" * 48)

    def test_read_without_data_is_empty(self):
        self.assertEqual(self.server.read_datagram(48), b"")

    def test_open_is_idempotent_and_close_resets(self):
        port = self.server.local_port
        self.server.open(0)
        self.assertEqual(self.server.local_port, port)
        self.assertTrue(self.server.is_open)

        self.server.close()
        self.assertFalse(self.server.is_open)
        self.server.close()

    def test_closed_transport_raises(self):
        self.client.close()
        with self.assertRaises(TransportError):
            self.client.send_datagram("127.0.0.1", 123, b"\x00")
        with self.assertRaises(TransportError):
            self.client.available()
        with self.assertRaises(TransportError):
            self.client.read_datagram(48)

    def test_empty_datagram_is_dropped(self):
        payload = make_response(1700000000)
        self.client.send_datagram("127.0.0.1", self.server.local_port, b"")
        self.client.send_datagram("127.0.0.1", self.server.local_port, payload)

        self.assertEqual(self._wait_available(self.server), 48)
        self.assertEqual(self.server.read_datagram(48), payload)

    def test_discard_pending(self):
        for data in (b"a", b"", b"ccc"):
            self.client.send_datagram("127.0.0.1", self.server.local_port, data)
        time.sleep(0.05)

        self.assertEqual(self.server.discard_pending(), 3)
        self.assertEqual(self.server.available(), 0)
        self.assertEqual(self.server.discard_pending(), 0)

    def test_port_in_use_raises(self):
        other = UdpTransport("127.0.0.1")
        with self.assertRaises(TransportError):
            other.open(self.server.local_port)
        self.assertFalse(other.is_open)


class _ReplyingClock(FakeClock):
    """Runs `on_first_sleep` once, while the client is polling for its reply."""

    def __init__(self, on_first_sleep):
        super().__init__()
        self._on_first_sleep = on_first_sleep

    def sleep_millis(self, ms: int) -> None:
        super().sleep_millis(ms)
        if self._on_first_sleep is not None:
            hook, self._on_first_sleep = self._on_first_sleep, None
            hook()


class TestClientOverUdp(unittest.TestCase):
    def setUp(self):
        self.server = UdpTransport("127.0.0.1")
        self.server.open(0)
        self.transport = UdpTransport("127.0.0.1")

    def tearDown(self):
        self.server.close()
        self.transport.close()

    def _client(self, on_first_sleep):
        config = ClientConfig(server="127.0.0.1", server_port=self.server.local_port, local_port=0)
        return NTPClient(self.transport, config, _ReplyingClock(on_first_sleep))

    def _reply(self, *datagrams):
        def send():
            for data in datagrams:
                self.server.send_datagram("127.0.0.1", self.transport.local_port, data)
            time.sleep(0.05)
        return send

    def test_empty_datagram_before_reply(self):
        client = self._client(self._reply(b"", make_response(1700000000)))
        self.assertTrue(client.force_update())
        self.assertEqual(client.synchronized_epoch.epoch_seconds, 1700000000)

    def test_late_reply_is_not_used_by_next_exchange(self):
        client = self._client(None)
        client.ensure_started()
        self.server.send_datagram("127.0.0.1", self.transport.local_port, make_response(1111111111))
        time.sleep(0.05)

        client.clock._on_first_sleep = self._reply(make_response(1700000000))
        self.assertTrue(client.force_update())
        self.assertEqual(client.synchronized_epoch.epoch_seconds, 1700000000)


class TestCreateTransport(unittest.TestCase):
    def test_strips_udp_prefix(self):
        transport = create_transport("udp:127.0.0.1")
        self.assertIsInstance(transport, UdpTransport)
        self.assertEqual(transport.bind_address, "127.0.0.1")
        self.assertFalse(transport.is_open)

    def test_default_binds_all_interfaces(self):
        self.assertEqual(create_transport().bind_address, "")


if __name__ == "__main__":
    unittest.main()
