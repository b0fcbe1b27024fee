"""
Poseidon Flask Blueprint — 해시 엔드포인트
===========================================

GET  /poseidon/params               활성 프리셋 정보
GET  /poseidon/constants/<width>    폭 하나의 상수 테이블
POST /poseidon/permute              {"inputs": [...]} → 단일 순열 해시
POST /poseidon/hash                 {"inputs": [...]} → 가변 길이 해시
POST /poseidon/hash-bytes           {"hex": "..."} 또는 {"text": "..."}

해시 응답은 10진 문자열(hash)과 32바이트 리틀엔디언 hex(bytes)를 함께 준다.

생성한 상수 테이블은 TinyDB에 저장해 두고 다음 기동 때 다시 읽는다.
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from zkhash.errors import PoseidonError
from zkhash.field import fr_to_bytes
from zkhash.poseidon.constants import get_constants, verify_constants
from zkhash.poseidon.hasher import Poseidon
from zkhash.poseidon.params import REFERENCE

from poseidon_serializers import (
    serialize_fr, fr_short,
    serialize_width_constants,
    serialize_constants, deserialize_constants,
)

LOGGER = logging.getLogger(__name__)

poseidon_bp = Blueprint('poseidon', __name__, url_prefix='/poseidon')

DATA = Query()

# DB와 파라미터는 app.py에서 주입
DB = None
PARAMS = REFERENCE
HASHER = None


def init_poseidon_bp(db, params=REFERENCE):
    """app.py에서 DB와 프리셋을 주입받는다."""
    global DB, PARAMS, HASHER
    DB = db
    PARAMS = params
    HASHER = None


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def constants_key(params):
    return f"poseidon.constants.{params.name}"


def load_hasher(params):
    """DB에 저장된 상수 테이블로 해시기를 만든다.

    저장본이 없거나, 읽을 수 없거나, 새로 생성한 값과 다르면
    다시 생성해서 덮어쓴다.
    """
    key = constants_key(params)
    data = db_get(key)
    constants = None
    if data is not None:
        try:
            constants = verify_constants(deserialize_constants(data, params))
        except ValueError as e:
            LOGGER.warning("discarding stored constants for %s: %s", params.name, e)
    if constants is None:
        constants = get_constants(params)
        db_set(key, serialize_constants(constants))
    return Poseidon(params, constants)


def get_hasher():
    global HASHER
    if HASHER is None:
        HASHER = load_hasher(PARAMS)
    return HASHER


# ─── 요청 헬퍼 ───

def bad_request(error, message):
    LOGGER.warning("rejected poseidon request: %s", message)
    body = error.to_dict() if isinstance(error, PoseidonError) else {
        "error": "BadRequest", "message": message,
    }
    return jsonify(body), 400


def request_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def request_inputs():
    body = request_body()
    inputs = body.get("inputs")
    if not isinstance(inputs, list):
        raise TypeError('request body must contain an "inputs" list')
    return inputs


def request_bytes():
    body = request_body()
    if "hex" in body:
        return bytes.fromhex(body["hex"])
    if isinstance(body.get("text"), str):
        return body["text"].encode("utf-8")
    raise TypeError('request body must contain "hex" or "text"')


def hash_response(value):
    return jsonify({
        "preset": PARAMS.name,
        "hash": serialize_fr(value),
        "hash_short": fr_short(value),
        "bytes": fr_to_bytes(value).hex(),
    })


# ──────────────────────────────────────────────────────────────
# 엔드포인트
# ──────────────────────────────────────────────────────────────

@poseidon_bp.route("/params")
def params_page():
    """활성 프리셋 정보."""
    return jsonify(PARAMS.describe())


@poseidon_bp.route("/constants/<int:width>")
def constants_page(width):
    """폭 width의 라운드 상수와 MDS 행렬."""
    constants = get_hasher().constants
    if width not in constants:
        return jsonify({
            "error": "UnsupportedWidth",
            "message": f"width {width} is not configured",
            "widths": list(constants.widths),
        }), 404
    return jsonify(serialize_width_constants(constants[width]))


@poseidon_bp.route("/permute", methods=["POST"])
def permute_fixed():
    """단일 순열 해시."""
    try:
        return hash_response(get_hasher().permute_fixed(request_inputs()))
    except (TypeError, ValueError) as e:
        return bad_request(e, str(e))


@poseidon_bp.route("/hash", methods=["POST"])
def hash_elements():
    """가변 길이 원소 해시."""
    try:
        return hash_response(get_hasher().hash(request_inputs()))
    except (TypeError, ValueError) as e:
        return bad_request(e, str(e))


@poseidon_bp.route("/hash-bytes", methods=["POST"])
def hash_bytes():
    """바이트열 해시."""
    try:
        return hash_response(get_hasher().hash_bytes(request_bytes()))
    except (TypeError, ValueError) as e:
        return bad_request(e, str(e))
