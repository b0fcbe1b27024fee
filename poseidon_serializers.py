"""
Poseidon 데이터 직렬화/역직렬화 헬퍼
======================================

TinyDB와 JSON 응답에 저장 가능한 형태로 Poseidon 객체를 변환한다.
FR, FR 리스트, MDS 행렬, WidthConstants, Constants 등.

필드 원소는 10진 문자열로 저장한다 (JSON 정수 정밀도 문제 회피).
"""

from zkhash.field import FR
from zkhash.poseidon.constants import Constants, WidthConstants


# ─── FR ───

def serialize_fr(val):
    """FR → str(int)"""
    return str(int(val))


def deserialize_fr(s):
    """str(int) → FR"""
    return FR(int(s))


def fr_short(val, digits=8):
    """FR → 앞/뒤 몇 자리만 남긴 표시용 문자열"""
    s = str(int(val))
    if len(s) <= 2 * digits + 3:
        return s
    return f"{s[:digits]}...{s[-digits:]}"


# ─── FR list ───

def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [str(int(v)) for v in lst]


def deserialize_fr_list(data):
    """list[str] → list[FR]"""
    return [FR(int(s)) for s in data]


# ─── MDS matrix ───

def serialize_matrix(matrix):
    """t×t FR 행렬 → list[list[str]]"""
    return [serialize_fr_list(row) for row in matrix]


def deserialize_matrix(data):
    """list[list[str]] → list[list[FR]]"""
    return [deserialize_fr_list(row) for row in data]


# ─── WidthConstants ───

def serialize_width_constants(wc):
    """WidthConstants → dict"""
    return {
        "t": wc.t,
        "n_rounds_full": wc.n_rounds_full,
        "n_rounds_partial": wc.n_rounds_partial,
        "round_constants": serialize_fr_list(wc.round_constants),
        "mds": serialize_matrix(wc.mds),
        "cauchy_nonce": wc.cauchy_nonce,
    }


def deserialize_width_constants(data):
    """dict → WidthConstants"""
    return WidthConstants(
        t=data["t"],
        n_rounds_full=data["n_rounds_full"],
        n_rounds_partial=data["n_rounds_partial"],
        round_constants=deserialize_fr_list(data["round_constants"]),
        mds=deserialize_matrix(data["mds"]),
        cauchy_nonce=data.get("cauchy_nonce"),
    )


# ─── Constants ───

def serialize_constants(constants):
    """Constants → dict (파라미터 지문 포함)"""
    return {
        "params": constants.params.describe(),
        "widths": {
            str(t): serialize_width_constants(constants[t])
            for t in constants.widths
        },
    }


def deserialize_constants(data, params):
    """dict → Constants

    저장된 테이블이 params와 다른 설정으로 만들어졌으면 거부한다.

    Raises:
        ValueError: 시드/라운드 수/상수 배치가 params와 다르거나 형식이 깨졌을 때
    """
    try:
        return _deserialize_constants(data, params)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"malformed stored constants: {e!r}") from e


def _deserialize_constants(data, params):
    stored = data["params"]
    expected = params.describe()
    for key in ("seed", "n_rounds_full", "n_rounds_partial", "constant_layout"):
        if stored.get(key) != expected[key]:
            raise ValueError(
                f"stored constants have {key}={stored.get(key)!r}, expected {expected[key]!r}"
            )
    tables = {
        int(t): deserialize_width_constants(wc)
        for t, wc in data["widths"].items()
    }
    return Constants(params, tables)
