"""Startup behaviour: lifespan connects and disposes; the entrypoint exits 1 on database failure."""

import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from app import __main__ as entrypoint
from app.core.config import Settings
from app.core.database import DatabaseConnectionError
from app.main import create_app


class TestLifespan(unittest.TestCase):
    def test_startup_failure_propagates(self) -> None:
        app = create_app()
        with patch("app.main.connect", side_effect=DatabaseConnectionError("mysql: down")):
            with self.assertRaises(DatabaseConnectionError):
                with TestClient(app):
                    pass

    def test_opens_and_disposes_owned_engine(self) -> None:
        engine = MagicMock()
        app = create_app()
        with patch("app.main.connect", return_value=engine) as connect:
            with TestClient(app):
                self.assertIs(app.state.engine, engine)
            connect.assert_called_once()
        engine.dispose.assert_called_once()
        self.assertIsNone(app.state.engine)

    def test_injected_engine_is_not_disposed(self) -> None:
        engine = MagicMock()
        app = create_app(engine=engine)
        with patch("app.main.connect") as connect:
            with TestClient(app):
                pass
        connect.assert_not_called()
        engine.dispose.assert_not_called()


class TestEntrypoint(unittest.TestCase):
    def test_database_failure_exits_1(self) -> None:
        with patch.object(entrypoint, "get_settings", return_value=Settings(_env_file=None)), patch.object(
            entrypoint, "connect", side_effect=DatabaseConnectionError("mysql: could not establish a good connection")
        ), patch.object(entrypoint.uvicorn, "run") as run:
            self.assertEqual(entrypoint.main(), 1)
        run.assert_not_called()

    def test_serves_on_configured_port(self) -> None:
        engine = MagicMock()
        settings = Settings(_env_file=None, PORT="9090")
        with patch.object(entrypoint, "get_settings", return_value=settings), patch.object(
            entrypoint, "connect", return_value=engine
        ), patch.object(entrypoint.uvicorn, "run") as run:
            self.assertEqual(entrypoint.main(), 0)
        self.assertEqual(run.call_args.kwargs["port"], 9090)
        engine.dispose.assert_called_once()

    def test_listener_failure_exits_1(self) -> None:
        engine = MagicMock()
        with patch.object(entrypoint, "get_settings", return_value=Settings(_env_file=None)), patch.object(
            entrypoint, "connect", return_value=engine
        ), patch.object(entrypoint.uvicorn, "run", side_effect=OSError("address in use")):
            self.assertEqual(entrypoint.main(), 1)
        engine.dispose.assert_called_once()

    def test_bind_failure_is_logged_and_exits_1(self) -> None:
        engine = MagicMock()
        with patch.object(entrypoint, "get_settings", return_value=Settings(_env_file=None)), patch.object(
            entrypoint, "connect", return_value=engine
        ), patch.object(entrypoint.uvicorn, "run", side_effect=SystemExit(1)):
            with self.assertLogs(entrypoint.logger, level="ERROR") as logs:
                self.assertEqual(entrypoint.main(), 1)
        self.assertIn("HTTP listener failed", logs.output[0])
        engine.dispose.assert_called_once()


if __name__ == "__main__":
    unittest.main()
