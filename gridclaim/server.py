# gridclaim/server.py
from __future__ import annotations
import logging
import os
from typing import Optional

from flask import Flask, jsonify, render_template_string, request

from . import commands
from .field import PALETTE, cell_key
from .ledger import Ledger

log = logging.getLogger(__name__)

PAGE = """<!doctype html>
<html>
<head>
  <meta charset="utf-8">
  <title>Grid claims</title>
  <style>
    table { border-collapse: collapse; }
    td { width: 3em; height: 3em; border: 1px solid #999; text-align: center; font-size: 0.7em; }
  </style>
</head>
<body>
  <h1>Grid claims</h1>
  {% if message %}<p class="message">{{ message }}</p>{% endif %}
  <form method="post" action="/">
    <table>
      {% for row in rows %}{% set r = loop.index0 %}
      <tr>
        {% for claim in row %}{% set c = loop.index0 %}
        {% if claim %}
        <td style="background: {{ claim.color|lower }}" title="{{ claim.coordinates }}">{{ claim.owner }}</td>
        {% else %}
        <td><input type="checkbox" name="cells" value="{{ key(r, c) }}"></td>
        {% endif %}
        {% endfor %}
      </tr>
      {% endfor %}
    </table>
    <p>
      <label>Owner <input type="text" name="owner"></label>
      <label>Color
        <select name="color">
          {% for color in palette %}<option>{{ color }}</option>{% endfor %}
        </select>
      </label>
      <button type="submit">Claim</button>
    </p>
  </form>
</body>
</html>
"""


def create_app(ledger: Optional[Ledger] = None) -> Flask:
    app = Flask(__name__)
    # One ledger per app; handlers reach it through app config, never a module global.
    app.config["LEDGER"] = ledger if ledger is not None else Ledger()

    def _ledger() -> Ledger:
        return app.config["LEDGER"]

    def _page(message: Optional[str] = None, code: int = 200):
        html = render_template_string(
            PAGE,
            rows=commands.grid_rows(_ledger()),
            palette=PALETTE,
            key=cell_key,
            message=message,
        )
        return html, code

    @app.get("/health")
    def health():
        return jsonify({"status": "ok"})

    @app.get("/")
    def index():
        return _page()

    @app.post("/")
    def submit_form():
        try:
            result = commands.claim_cells(
                _ledger(),
                request.form.get("owner", ""),
                request.form.get("color", ""),
                request.form.getlist("cells"),
            )
        except ValueError as e:
            log.warning("rejected form submission: %s", e)
            return _page(str(e), 400)

        if result["status"] != "ok":
            return _page(result["message"], 409)
        message = f"{result['owner']} claimed {len(result['claimed'])} cell(s) in {result['color']}"
        return _page(message)

    @app.get("/claims")
    def api_claims():
        return jsonify(commands.field_view(_ledger()))

    @app.post("/claim")
    def api_claim():
        data = request.get_json(force=True, silent=True)
        if not isinstance(data, dict):
            return jsonify({"status": "error", "message": "expected a JSON object"}), 400

        cells = data.get("cells")
        if not isinstance(cells, list):
            return jsonify({"status": "error", "message": "cells must be a list"}), 400

        try:
            result = commands.claim_cells(_ledger(), data.get("owner"), data.get("color"), cells)
        except ValueError as e:
            log.warning("rejected claim request: %s", e)
            return jsonify({"status": "error", "message": str(e)}), 400

        if result["status"] != "ok":
            return jsonify(result), 409
        return jsonify(result)

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    host = os.environ.get("GRIDCLAIM_HOST", "127.0.0.1")
    port = int(os.environ.get("GRIDCLAIM_PORT", "5000"))
    app = create_app()
    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
