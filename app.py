import logging
import os

from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from zkhash.poseidon.params import params_from_env

from poseidon_routes import poseidon_bp, init_poseidon_bp

DB_PATH_ENV_VAR = "POSEIDON_DB_PATH"


def open_db(path=None):
    """POSEIDON_DB_PATH가 없으면 메모리 DB를 쓴다."""
    if path is None:
        path = os.environ.get(DB_PATH_ENV_VAR)
    if not path:
        return TinyDB(storage=MemoryStorage)  # Memory DB
    return TinyDB(path)                       # Storage DB


def create_app(db=None, params=None):
    if db is None:
        db = open_db()
    if params is None:
        params = params_from_env()

    app = Flask(__name__)
    app.secret_key = os.environ.get("POSEIDON_SECRET_KEY", "key")

    init_poseidon_bp(db.table("poseidon"), params)
    app.register_blueprint(poseidon_bp)

    @app.route("/")
    def main():
        return jsonify({
            "service": "poseidon",
            "preset": params.name,
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules()
                if rule.endpoint.startswith("poseidon.")
            ),
        })

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    create_app().run(debug=True)
