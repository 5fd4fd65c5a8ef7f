# primegen/web.py
# GET /api/prime?kind=random&digits=100&rounds=20
# GET /api/health

import time
from flask import Flask, request, jsonify
from werkzeug.exceptions import BadRequest

from .config import GP_BIN, MAX_HTTP_DIGITS, MR_ROUNDS, ORACLE
from .errors import InvalidSize, UnsupportedKind
from .generate import generate_prime
from .pipeline import default_pipeline

app = Flask(__name__)

@app.errorhandler(InvalidSize)
def _invalid_size(e):
    return jsonify(ok=False, error="InvalidSize", msg=str(e)), 400

@app.errorhandler(UnsupportedKind)
def _unsupported(e):
    return jsonify(ok=False, error="UnsupportedKind", msg=str(e)), 501

# bad PRIMEGEN_* settings surface here (e.g. an unknown PRIMEGEN_ORACLE)
@app.errorhandler(ValueError)
def _server_config(e):
    return jsonify(ok=False, error="ConfigError", msg=str(e)), 500

def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise BadRequest(f"{name} must be integer")

@app.get("/api/prime")
def api_prime():
    kind = request.args.get("kind", "random").strip() or "random"
    if "digits" not in request.args:
        raise BadRequest("missing digits")
    digits = _int_arg("digits", 0)
    rounds = _int_arg("rounds", MR_ROUNDS)
    if digits > MAX_HTTP_DIGITS:
        raise BadRequest(f"digits must be <= {MAX_HTTP_DIGITS}")
    if rounds < 1 or rounds > 256:
        raise BadRequest("rounds must be in 1..256")

    t0 = time.perf_counter()
    res = generate_prime(kind, digits, pipeline=default_pipeline(rounds=rounds))
    dt_ms = int((time.perf_counter() - t0) * 1000)
    body = res.as_dict()
    body.update(ok=True, rounds_mr=rounds, duration_ms=dt_ms)
    return jsonify(body)

@app.get("/api/health")
def api_health():
    return jsonify(ok=True, oracle=ORACLE, gp=bool(GP_BIN), mr_rounds=MR_ROUNDS)

if __name__ == "__main__":
    app.run("127.0.0.1", 8082, debug=True)
