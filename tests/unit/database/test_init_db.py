import unittest
from unittest.mock import patch

from sqlalchemy import inspect

from database.database import build_engine
from database.init_db import init_db


class TestInitDb(unittest.TestCase):

    def test_creates_every_table(self):
        engine = build_engine("sqlite:///:memory:")
        init_db(engine)
        tables = set(inspect(engine).get_table_names())
        self.assertTrue({"listing", "listing_invitation", "interaction", "buyer_profile"} <= tables)
        engine.dispose()

    def test_retries_until_database_is_up(self):
        engine = build_engine("sqlite:///:memory:")
        with patch("database.init_db.Base.metadata.create_all",
                   side_effect=[RuntimeError("not ready"), None]) as create_all:
            with patch("time.sleep"):
                init_db(engine)
        self.assertEqual(create_all.call_count, 2)
        engine.dispose()


if __name__ == '__main__':
    unittest.main()
