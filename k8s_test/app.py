import logging
import sys
import time
from datetime import datetime
from typing import Mapping, Optional

from flask import Flask, Response, g, request
from slugify import slugify

from k8s_test.config import Settings
from k8s_test.context import ServiceContext
from k8s_test.kube import ClusterClient
from k8s_test.sections import assemble

TEMPLATE_NAMES = ("index.html", "style.css", "script.js", "data.html")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def to_slug(text) -> str:
    """URL and DOM id safe form of `text`: lowercase, hyphenated, ASCII only."""
    return slugify(str(text))


def resolve_level(level_name: str) -> int:
    """Numeric level for a name like `DEBUG`; unknown names fall back to INFO."""
    level = logging.getLevelName((level_name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str = "INFO") -> None:
    """Send all logs to stdout so they appear in the container output."""
    level = resolve_level(level_name)
    logging.basicConfig(
        stream=sys.stdout, level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logging.getLogger("werkzeug").setLevel(level)


def create_app(
    settings: Optional[Settings] = None,
    kube_client: Optional[ClusterClient] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Flask:
    """
    Build the status page application.

    `kube_client` defaults to an in-cluster client when the service
    discovery variables are present. `environ` replaces os.environ as the
    source of the "Environment Variables" section.

    All four templates are compiled here; a broken template raises and the
    process does not start.
    """
    settings = settings or Settings.from_env()

    app = Flask(__name__, static_folder=None)
    app.logger.setLevel(resolve_level(settings.log_level))
    app.jinja_env.filters["to_slug"] = to_slug
    app.jinja_env.globals["to_slug"] = to_slug

    if kube_client is None:
        kube_client = ClusterClient.from_env(settings)

    ctx = ServiceContext(
        settings=settings,
        started_at=datetime.now().astimezone(),
        kube=kube_client,
        templates={name: app.jinja_env.get_template(name) for name in TEMPLATE_NAMES},
    )
    app.extensions["k8s_test"] = ctx

    colors = {
        "background_color": settings.background_color,
        "foreground_color": settings.foreground_color,
    }

    # --- Request logging ---
    if settings.request_logging:
        @app.before_request
        def _log_request_start():
            g._req_start_time = time.time()

        @app.after_request
        def _log_request_end(response):
            start = getattr(g, "_req_start_time", None)
            duration = (time.time() - start) * 1000.0 if start else 0.0
            app.logger.info(
                f"{request.remote_addr or '-'} {request.method} {request.path} "
                f"{response.status_code} {duration:.2f}ms"
            )
            return response

    # --- Routes ---
    @app.route("/health")
    def health():
        """Liveness probe; never touches any other subsystem."""
        return Response("OK", status=200, mimetype="text/plain")

    @app.route("/style")
    def style():
        css = ctx.templates["style.css"].render(**colors)
        return Response(css, mimetype="text/css", headers=NO_CACHE_HEADERS)

    @app.route("/script")
    def script():
        return Response(ctx.templates["script.js"].render(), mimetype="text/javascript")

    @app.route("/data")
    def data():
        """Collect every section and stream the HTML fragment."""
        sections = assemble(ctx, environ)
        # Rendered incrementally: a template error cuts the response short.
        body = ctx.templates["data.html"].generate(sections=sections, **colors)
        return Response(body, mimetype="text/html")

    @app.route("/", defaults={"path": ""})
    @app.route("/<path:path>")
    def index(path):
        """Serves the page shell for the root and any unknown path."""
        html = ctx.templates["index.html"].render(title=settings.title)
        return Response(html, mimetype="text/html")

    return app


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    app.logger.info(f"Starting {settings.title} on :{settings.port}")
    app.run(host="0.0.0.0", port=settings.port, threaded=True)


if __name__ == "__main__":
    main()
