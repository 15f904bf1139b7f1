import os
import sys
import unittest
from pathlib import Path
from unittest import mock

import requests
from typer.testing import CliRunner

# Ensure src/ is importable when running tests without installation
SYS_PATH_ADDED = str(Path(__file__).resolve().parents[1] / "src")
if SYS_PATH_ADDED not in sys.path:
    sys.path.insert(0, SYS_PATH_ADDED)

from mvg_fahrinfo import cli, config, decode  # noqa: E402
from mvg_fahrinfo.errors import TransportError, UnexpectedStatus  # noqa: E402

import payloads  # noqa: E402


def _locations(*items):
    return decode.decode_locations(payloads.dumps({"locations": list(items)}))


class FakeMVG:
    """Stands in for the client; records what the CLI asked for."""

    id_error = None
    calls = []

    def __init__(self, timeout=None):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def stations_by_id(self, station_id):
        FakeMVG.calls.append(("id", station_id))
        if FakeMVG.id_error is not None:
            raise FakeMVG.id_error
        return _locations(payloads.MUENCHEN_MARIENPLATZ)

    def stations_by_name(self, search):
        FakeMVG.calls.append(("name", search))
        return _locations(payloads.ADDRESS, payloads.STATION)

    def departures_by_id(self, station_id):
        FakeMVG.calls.append(("departures", station_id))
        return decode.decode_departures(
            payloads.dumps({"servingLines": [], "departures": [payloads.DEPARTURE]})
        )

    def connections(self, from_id, to_id, options=None):
        FakeMVG.calls.append(("connections", from_id, to_id, options))
        return []


class CliTests(unittest.TestCase):
    def setUp(self):
        FakeMVG.id_error = None
        FakeMVG.calls = []
        self.runner = CliRunner()
        patches = [
            mock.patch.object(cli, "MVG", FakeMVG),
            mock.patch.object(config, "DEFAULT_CONFIG", Path(__file__).parent / "no_such.conf"),
            mock.patch.dict(os.environ, {"MVG_COLOR_OPTION": "No"}, clear=True),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def test_stations_lists_only_stations(self):
        result = self.runner.invoke(cli.app, ["stations", "Marienplatz"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(result.output.strip().splitlines(), ["Marienplatz, Oberalting"])

    def test_departures_by_id(self):
        result = self.runner.invoke(cli.app, ["departures", "de:09162:2"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Departures at station Marienplatz, München:", result.output)
        self.assertIn("U3\tMoosach", result.output)
        self.assertEqual(FakeMVG.calls, [("id", "de:09162:2"), ("departures", "de:09162:2")])

    def test_departures_fall_back_to_name_search(self):
        FakeMVG.id_error = UnexpectedStatus(404, "station id Marienplatz")
        result = self.runner.invoke(cli.app, ["departures", "Marienplatz"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(
            FakeMVG.calls,
            [("id", "Marienplatz"), ("name", "Marienplatz"), ("departures", "de:09188:5516")],
        )

    def test_transport_error_is_not_masked(self):
        FakeMVG.id_error = TransportError("https://www.mvg.de/", requests.ConnectionError("down"))
        result = self.runner.invoke(cli.app, ["departures", "de:09162:2"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Error:", result.output)
        self.assertEqual(FakeMVG.calls, [("id", "de:09162:2")])

    def test_departures_use_default_station(self):
        with mock.patch.dict(os.environ, {"MVG_DEFAULT_STATION": "de:09162:2"}):
            result = self.runner.invoke(cli.app, ["departures"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(FakeMVG.calls[0], ("id", "de:09162:2"))

    def test_departures_without_station(self):
        result = self.runner.invoke(cli.app, ["departures"])
        self.assertNotEqual(result.exit_code, 0)
        self.assertEqual(FakeMVG.calls, [])

    def test_routes_without_connections(self):
        result = self.runner.invoke(cli.app, ["routes", "de:09162:2", "de:09162:2", "--no-bus"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("No connections from", result.output)
        options = FakeMVG.calls[-1][3]
        self.assertFalse(options.bus)
        self.assertTrue(options.tram)

    def test_departures_json(self):
        result = self.runner.invoke(cli.app, ["departures", "de:09162:2", "--json-out"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"lineBackgroundColor": "#ec6725"', result.output)


if __name__ == "__main__":
    unittest.main()
