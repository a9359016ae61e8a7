# extensions/logger.py
import os, sys, logging, json, uuid, time
from logging.handlers import RotatingFileHandler
from flask import g, request, has_request_context

_REQUEST_ID_KEY = "request_id"
# record attributes copied into JSON lines when present
_CONTEXT_FIELDS = ("request_id", "user_id", "method", "path", "status", "duration_ms")

access_logger = logging.getLogger("blog.access")


class JsonFormatter(logging.Formatter):
    def format(self, record):
        data = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                data[key] = value
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


class RequestContextFilter(logging.Filter):
    """Stamps request id and, once auth_required ran, the caller's user id."""

    def filter(self, record):
        record.request_id = "-"
        if has_request_context():
            record.request_id = getattr(g, _REQUEST_ID_KEY, "-")
            principal = getattr(g, "principal", None)
            if principal is not None:
                record.user_id = principal.id
        return True


def _ensure_request_id():
    if not hasattr(g, _REQUEST_ID_KEY):
        setattr(g, _REQUEST_ID_KEY, request.headers.get("X-Request-ID") or uuid.uuid4().hex)
    return getattr(g, _REQUEST_ID_KEY)


def _build_handlers(cfg, level):
    fmt = JsonFormatter() if cfg["LOG_JSON"] else logging.Formatter(
        "%(asctime)s | %(levelname)s | %(request_id)s | %(name)s | %(message)s",
        "%Y-%m-%d %H:%M:%S",
    )
    handlers = [(logging.StreamHandler(sys.stdout), level)]

    if cfg.get("LOG_TO_FILE", True):
        log_dir = cfg["LOG_DIR"]
        os.makedirs(log_dir, exist_ok=True)
        for filename, lvl in (("blog.log", level), ("error.log", logging.ERROR)):
            handlers.append((
                RotatingFileHandler(
                    os.path.join(log_dir, filename),
                    maxBytes=cfg["LOG_MAX_BYTES"],
                    backupCount=cfg["LOG_BACKUP_COUNT"],
                    encoding="utf-8",
                ),
                lvl,
            ))

    for handler, lvl in handlers:
        handler.setLevel(lvl)
        handler.setFormatter(fmt)
        handler.addFilter(RequestContextFilter())
    return [h for h, _ in handlers]


def _install_handlers(app):
    root = logging.getLogger()
    # only once per process; app factories in tests call this repeatedly
    if getattr(root, "_blog_handlers_installed", False):
        return

    level = getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO)
    root.setLevel(level)
    for handler in _build_handlers(app.config, level):
        root.addHandler(handler)
    root._blog_handlers_installed = True

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.INFO)


def init_logger(app):
    _install_handlers(app)
    app.logger.info("Logger initialized for %s", app.config.get("APP_NAME"))

    @app.before_request
    def _before():
        g._req_start = time.time()
        _ensure_request_id()

    @app.after_request
    def _after(resp):
        duration = (time.time() - getattr(g, "_req_start", time.time())) * 1000
        resp.headers["X-Request-ID"] = getattr(g, _REQUEST_ID_KEY, "-")
        access_logger.info(
            "%s %s %s %.1fms", request.method, request.path, resp.status_code, duration,
            extra={
                "method": request.method,
                "path": request.path,
                "status": resp.status_code,
                "duration_ms": round(duration, 1),
            },
        )
        return resp
