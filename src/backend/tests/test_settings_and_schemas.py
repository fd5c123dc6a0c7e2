"""Tests for settings wiring and response schema configuration."""

import importlib
import warnings

import pytest
from pydantic.warnings import PydanticDeprecatedSince20
from sqlalchemy.engine import make_url

from medal_compass.core.config import Settings
from medal_compass.db import session as db_session
from medal_compass.schemas import collection as schemas_collection
from medal_compass.schemas import medal as schemas_medal
from medal_compass.schemas import report as schemas_report
from medal_compass.services import collection_service


def test_database_url_names_the_psycopg2_driver():
    settings = Settings(DB_HOST="db", DB_PORT=5433, DB_NAME="medals", DB_USER="app", DB_PASSWORD="secret")

    url = make_url(str(settings.DATABASE_URL))

    assert url.drivername == "postgresql+psycopg2"
    assert (url.host, url.port, url.database, url.username) == ("db", 5433, "medals", "app")


def test_engine_uses_psycopg2():
    assert db_session.engine.dialect.driver == "psycopg2"


@pytest.mark.parametrize("module", [schemas_medal, schemas_collection, schemas_report])
def test_schemas_define_config_without_deprecation_warnings(module):
    with warnings.catch_warnings():
        warnings.simplefilter("error", PydanticDeprecatedSince20)
        importlib.reload(module)


def test_collection_schema_reads_orm_rows(db, make_medal):
    medal = make_medal(user_id="alice")
    row = collection_service.collect_medal(db, "bob", medal.medal_no)

    collection = schemas_collection.MedalCollection.model_validate(row)

    assert collection.medal_no == medal.medal_no
    assert collection.user_id == "bob"
    assert collection.collected_at is not None
