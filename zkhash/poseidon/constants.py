"""
Poseidon 상수 생성기 (ConstantGenerator)
==========================================

시드 문자열에서 라운드 상수와 MDS 혼합 행렬을 결정론적으로 생성한다.

**라운드 상수 (ARK)**:
  폭 t의 테이블 길이는 t × (n_full + n_partial[t]) 이고,
  라운드 i는 [i·t, (i+1)·t) 구간을 사용한다.
  - per_slot:  derive(seed + "_constants", t × 라운드 수)
  - per_round: derive(seed + "_constants", 라운드 수)의 각 값을 t번 반복
               (라운드마다 모든 슬롯에 같은 상수를 더하는 기준 구현과 동일)

**MDS 행렬 (Cauchy 행렬)**:
  1. nonce = 0부터 시작하여 x = derive(seed + "_matrix_" + "%04d" % nonce, 2t)
  2. x에 0이 있거나 중복 원소가 있으면 nonce를 올려 다시 생성 (거부 샘플링)
  3. M[i][j] = 1 / (x[i] - x[t+j])   (i, j ∈ [0, t))

  검증을 통과한 x에서는 x[i] - x[t+j] ≠ 0 이므로 역원이 항상 존재한다.
  그래도 0의 역원이 요청되면 GenerationInvariantViolated로 즉시 실패한다.

**공유 / 불변성**:
  생성 결과는 튜플로만 보관되며 이후 변경되지 않는다.
  get_constants()는 파라미터별로 한 번만 생성하고(잠금으로 보호)
  여러 스레드의 해시 호출이 읽기 전용으로 공유한다.

사용 예시:
    >>> constants = get_constants(REFERENCE)
    >>> wc = constants[6]
    >>> len(wc.round_constants)   # 6 × 65 = 390
    >>> len(wc.mds), len(wc.mds[0])  # 6, 6
"""

import logging
import threading
from types import MappingProxyType

from zkhash.field import FR, modinv
from zkhash.poseidon.params import REFERENCE, LAYOUT_PER_ROUND
from zkhash.poseidon.prg import derive


LOGGER = logging.getLogger(__name__)

CONSTANTS_SUFFIX = "_constants"
MATRIX_SUFFIX = "_matrix_"


# ─────────────────────────────────────────────────────────────────────
# 상수 컨테이너
# ─────────────────────────────────────────────────────────────────────

class WidthConstants:
    """폭 t 하나에 대한 상수 묶음.

    속성:
        t: 상태 폭
        n_rounds_full, n_rounds_partial: 라운드 스케줄
        round_constants: tuple[FR], 길이 ≥ t × 전체 라운드 수
        mds: tuple[tuple[FR]], t × t
        cauchy_nonce: 검증을 통과한 nonce (생성 시에만 알 수 있음, 로드 시 None)
        cauchy_source: 행렬을 만든 2t개 스칼라 (int), 로드 시 None
    """

    def __init__(self, t, n_rounds_full, n_rounds_partial, round_constants, mds,
                 cauchy_nonce=None, cauchy_source=None):
        total = n_rounds_full + n_rounds_partial
        if len(round_constants) < t * total:
            raise ValueError(
                f"width {t} needs {t * total} round constants, got {len(round_constants)}"
            )
        if len(mds) != t or any(len(row) != t for row in mds):
            raise ValueError(f"MDS matrix for width {t} must be {t}x{t}")

        self.t = t
        self.n_rounds_full = n_rounds_full
        self.n_rounds_partial = n_rounds_partial
        self.round_constants = tuple(FR(c) for c in round_constants)
        self.mds = tuple(tuple(FR(v) for v in row) for row in mds)
        self.cauchy_nonce = cauchy_nonce
        self.cauchy_source = tuple(cauchy_source) if cauchy_source is not None else None

    @property
    def total_rounds(self):
        return self.n_rounds_full + self.n_rounds_partial

    def round_slice(self, i):
        """라운드 i가 더하는 t개의 상수."""
        return self.round_constants[i * self.t:(i + 1) * self.t]

    def as_ints(self):
        """비교/직렬화용 정수 표현."""
        return (
            tuple(int(c) for c in self.round_constants),
            tuple(tuple(int(v) for v in row) for row in self.mds),
        )

    def __eq__(self, other):
        if not isinstance(other, WidthConstants):
            return NotImplemented
        return (self.t == other.t
                and self.n_rounds_full == other.n_rounds_full
                and self.n_rounds_partial == other.n_rounds_partial
                and self.as_ints() == other.as_ints())

    def __repr__(self):
        return (f"WidthConstants(t={self.t}, rounds={self.n_rounds_full}"
                f"+{self.n_rounds_partial})")


class Constants:
    """파라미터 하나에 대한 전체 상수: {t: WidthConstants}."""

    def __init__(self, params, tables):
        missing = set(params.widths) - set(tables)
        if missing:
            raise ValueError(f"missing constant tables for widths {sorted(missing)}")
        self.params = params
        self.tables = MappingProxyType({t: tables[t] for t in params.widths})

    @property
    def widths(self):
        return tuple(self.tables)

    def __getitem__(self, t):
        return self.tables[t]

    def __contains__(self, t):
        return t in self.tables

    def __eq__(self, other):
        if not isinstance(other, Constants):
            return NotImplemented
        return (self.params.fingerprint() == other.params.fingerprint()
                and dict(self.tables) == dict(other.tables))

    def __repr__(self):
        return f"Constants(params={self.params.name!r}, widths={self.widths})"


# ─────────────────────────────────────────────────────────────────────
# MDS 행렬 (Cauchy 구성 + 거부 샘플링)
# ─────────────────────────────────────────────────────────────────────

def nonce_to_string(nonce):
    """nonce를 최소 4자리로 0-패딩한 10진 문자열로 만든다."""
    return f"{nonce:04d}"


def check_all_different(values):
    """0이 없고 모든 원소가 서로 다르면 True."""
    seen = set()
    for v in values:
        v = int(v)
        if v == 0 or v in seen:
            return False
        seen.add(v)
    return True


def cauchy_source(seed, t):
    """검증을 통과하는 첫 번째 nonce와 그 2t개 스칼라를 찾는다.

    Returns:
        (int, list[int]): (nonce, x[0..2t))
    """
    nonce = 0
    while True:
        candidate = [int(x) for x in derive(f"{seed}{MATRIX_SUFFIX}{nonce_to_string(nonce)}", 2 * t)]
        if check_all_different(candidate):
            return nonce, candidate
        LOGGER.debug("rejected Cauchy candidate for t=%d at nonce %s", t, nonce_to_string(nonce))
        nonce += 1


def cauchy_matrix(source, t):
    """M[i][j] = (x[i] - x[t+j])⁻¹ 로 t × t Cauchy 행렬을 만든다.

    Raises:
        GenerationInvariantViolated: x[i] ≡ x[t+j] 인 쌍이 있을 때
    """
    if len(source) != 2 * t:
        raise ValueError(f"Cauchy source for width {t} must have {2 * t} scalars")
    return tuple(
        tuple(FR(modinv(source[i] - source[t + j])) for j in range(t))
        for i in range(t)
    )


def generate_mds(seed, t):
    """(행렬, nonce, 원천 스칼라)를 돌려준다."""
    nonce, source = cauchy_source(seed, t)
    return cauchy_matrix(source, t), nonce, source


# ─────────────────────────────────────────────────────────────────────
# 라운드 상수
# ─────────────────────────────────────────────────────────────────────

def generate_round_constants(params, t):
    """폭 t의 라운드 상수 테이블 (길이 t × 전체 라운드 수)."""
    total = params.total_rounds(t)
    seed = params.seed + CONSTANTS_SUFFIX
    if params.constant_layout == LAYOUT_PER_ROUND:
        per_round = derive(seed, total)
        return [c for c in per_round for _ in range(t)]
    return derive(seed, t * total)


def generate_width_constants(params, t):
    matrix, nonce, source = generate_mds(params.seed, t)
    return WidthConstants(
        t=t,
        n_rounds_full=params.n_rounds_full,
        n_rounds_partial=params.n_rounds_partial[t],
        round_constants=generate_round_constants(params, t),
        mds=matrix,
        cauchy_nonce=nonce,
        cauchy_source=source,
    )


def generate_constants(params=REFERENCE):
    """params가 지정하는 모든 폭의 상수를 생성한다.

    같은 params로 여러 번 호출해도 결과는 바이트 단위로 동일하다.

    Args:
        params: PoseidonParams (기본값: reference 프리셋)

    Returns:
        Constants
    """
    tables = {t: generate_width_constants(params, t) for t in params.widths}
    LOGGER.info(
        "generated Poseidon constants for preset %s (widths %s, cauchy nonces %s)",
        params.name, list(tables), [tables[t].cauchy_nonce for t in tables],
    )
    return Constants(params, tables)


# ─────────────────────────────────────────────────────────────────────
# 프로세스 단위 1회 생성 캐시
# ─────────────────────────────────────────────────────────────────────

_CACHE = {}
_CACHE_LOCK = threading.Lock()


def get_constants(params=REFERENCE):
    """params별로 한 번만 생성한 공유 Constants를 돌려준다."""
    key = params.fingerprint()
    with _CACHE_LOCK:
        constants = _CACHE.get(key)
        if constants is None:
            constants = generate_constants(params)
            _CACHE[key] = constants
    return constants


def verify_constants(constants):
    """미리 계산된(예: 저장소에서 읽은) Constants를 새로 생성한 값과 비교한다.

    저장된 테이블은 즉석 생성 결과와 바이트 단위로 같아야 한다.
    검증을 통과하면 캐시에 있는 생성본을 돌려주므로, 손상된 테이블이
    프로세스 캐시에 들어가는 일은 없다.

    Raises:
        ValueError: 라운드 상수나 MDS 행렬이 하나라도 다를 때
    """
    generated = get_constants(constants.params)
    if generated != constants:
        raise ValueError("stored constants differ from the generated ones")
    return generated
