"""
app.py
------
Local preview server for the rendered heatmap.

    python -m sunmap.app
    open http://localhost:8123

Routes:
    GET /         -> the bundled preview page (embeds /visualization.png)
    GET /<path>   -> file under the root directory, Content-Type from
                     config.MIME_TYPES, 404 "Not found" if it isn't there
"""

from pathlib import Path

from flask import Flask, Response
from werkzeug.security import safe_join

from sunmap import config


def _not_found() -> Response:
    return Response("Not found", status=404)


def _file_response(path: str) -> Response:
    with open(path, "rb") as f:
        data = f.read()
    return Response(data, status=200, headers={"Content-Type": config.mime_type_for(path)})


def create_app(root_dir: str = ".") -> Flask:
    """
    Build the preview server.

    Args:
        root_dir: directory served under /<path>. Defaults to the working
                  directory, which is where the renderer writes its PNG.
    """
    app = Flask(__name__, static_folder=None)
    root = str(Path(root_dir).resolve())

    @app.route("/", methods=["GET"])
    def index():
        return _file_response(str(config.PREVIEW_DOCUMENT))

    @app.route("/<path:filename>", methods=["GET"])
    def static_file(filename):
        path = safe_join(root, filename)
        if path is None:
            app.logger.info("rejected path outside root: %s", filename)
            return _not_found()
        try:
            return _file_response(path)
        except OSError as e:
            app.logger.info("not found: %s (%s)", filename, e)
            return _not_found()

    return app


def main():
    app = create_app()
    print(f"Server running at http://{config.SERVER_HOST}:{config.SERVER_PORT}")
    app.run(host=config.SERVER_HOST, port=config.SERVER_PORT, debug=False)


if __name__ == '__main__':
    main()
