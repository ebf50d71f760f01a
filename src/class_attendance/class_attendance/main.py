from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import RequestEntityTooLarge

from config import get_settings_module

from .common.http import fail
from .common.log import configure_logging
from .container import STORAGE_MYSQL, Container, build_container, build_repositories
from .core.constants import DEFAULT_MAX_UPLOAD_MB
from .database.bootstrap import apply_schema, list_tables
from .lists.controller import register as register_lists
from .reports.controller import register as register_reports
from .roster.controller import register as register_roster

logger = logging.getLogger(__name__)

# Room for multipart framing on top of the file itself.
_MULTIPART_OVERHEAD = 64 * 1024


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    max_upload_mb = int(getattr(settings, "MAX_UPLOAD_MB", DEFAULT_MAX_UPLOAD_MB))
    app.config["MAX_CONTENT_LENGTH"] = max_upload_mb * 1024 * 1024 + _MULTIPART_OVERHEAD

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        storage_backend = getattr(settings, "STORAGE_BACKEND", STORAGE_MYSQL)
        db_config = getattr(settings, "DB_CONFIG", {})
        logger.info("settings=%s storage=%s", settings_module, storage_backend)

        if storage_backend == STORAGE_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

        lists_repo, entries_repo = build_repositories(
            storage_backend=storage_backend,
            db_config=db_config,
            local_store_path=getattr(settings, "LOCAL_STORE_PATH", None),
        )
        container = build_container(lists_repo=lists_repo, entries_repo=entries_repo, max_upload_mb=max_upload_mb)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(_e):
        return fail(f"El archivo es demasiado grande. Máximo {max_upload_mb}MB permitido.", 413)

    register_lists(app, container)
    register_roster(app, container)
    register_reports(app, container)

    return app
